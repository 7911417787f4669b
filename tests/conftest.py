"""Pytest configuration and fixtures"""
import os
import pytest

from nettoria.cart import Cart, CartManager, CartStorage, MemoryBackend

# Set test environment variables
os.environ.setdefault("CART_STORAGE", "memory")
os.environ.setdefault("LOG_LEVEL", "WARNING")


@pytest.fixture
def backend():
    """Empty in-memory key-value backend"""
    return MemoryBackend()


@pytest.fixture
def storage(backend):
    """Cart storage scoped to a test session"""
    return CartStorage(backend, namespace="session-1")


@pytest.fixture
def manager(storage):
    """Cart manager over in-memory storage"""
    return CartManager(storage)


@pytest.fixture
def sample_items():
    """The two sample servers used on the cart page"""
    return [
        {
            "name": "سرور ققنوس",
            "code": "SRV-IR-17000000000001",
            "quantity": 1,
            "price": 599000,
            "type": "server",
            "duration": 6,
            "extras": {"datacenter": "tehran", "os": "ubuntu"},
        },
        {
            "name": "سرور سیمرغ",
            "code": "SRV-IR-17000000000002",
            "quantity": 1,
            "price": 899000,
            "type": "server",
            "duration": 1,
            "extras": {"datacenter": "shiraz", "os": "centos"},
        },
    ]


@pytest.fixture
def sample_cart(sample_items):
    """Cart holding the sample servers"""
    return Cart.from_list(sample_items)
