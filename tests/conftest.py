"""
Shared pytest fixtures for cfadmission tests.

This module provides common fixtures including:
- FakeResourceReader: in-memory stand-in for Kubernetes lookups
- Redis mocks for registry and event tests
- A DuplicateValidator factory over in-memory registries
"""

import os
import sys
from unittest.mock import AsyncMock

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cfadmission.modules.coordination import DuplicateValidator, LoggingClaimEvents
from cfadmission.modules.registry import InMemoryNameRegistry
from fixtures.reader import FakeResourceReader
from fixtures.resources import ROOT_NAMESPACE


@pytest.fixture
def root_namespace():
    return ROOT_NAMESPACE


@pytest.fixture
def reader():
    return FakeResourceReader()


@pytest.fixture
def mock_redis():
    """Create a mock Redis client for async operations."""
    redis = AsyncMock()
    redis.eval = AsyncMock(return_value=1)
    redis.delete = AsyncMock(return_value=1)
    redis.hgetall = AsyncMock(return_value={})
    redis.get = AsyncMock(return_value=None)
    redis.publish = AsyncMock(return_value=0)
    redis.lpush = AsyncMock(return_value=1)
    redis.ltrim = AsyncMock(return_value=True)
    redis.lrange = AsyncMock(return_value=[])
    redis.incrby = AsyncMock(return_value=1)
    redis.expire = AsyncMock(return_value=True)
    redis.ping = AsyncMock(return_value=True)
    return redis


@pytest.fixture
def events():
    recorder = AsyncMock(spec=LoggingClaimEvents)
    recorder.recent_events = AsyncMock(return_value=[])
    return recorder


@pytest.fixture
def duplicates():
    """Factory for DuplicateValidators over fresh in-memory registries."""

    def build(entity_type: str, events=None) -> DuplicateValidator:
        return DuplicateValidator(InMemoryNameRegistry(entity_type), events)

    return build
