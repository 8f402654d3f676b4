"""Pytest configuration and fixtures."""

import pytest

from adapters.base import DeployContext, LocalDeclaration
from config import reset_config


@pytest.fixture(autouse=True)
def fresh_config():
    """Reset the config singleton around every test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def ctx():
    """Deploy context for a stack without SSOT."""
    return DeployContext(stack="mystack-dev", ssot=False)


@pytest.fixture
def ssot_ctx():
    """Deploy context for a stack with SSOT enabled."""
    return DeployContext(stack="mystack-dev", ssot=True)


@pytest.fixture
def declarations():
    """Three declarations in template order."""
    return [
        LocalDeclaration(name="first", spec={"value": 1}),
        LocalDeclaration(name="second", spec={"value": 2}),
        LocalDeclaration(name="third", spec={"value": 3}),
    ]


@pytest.fixture
def sample_template():
    """A template declaring one entry of every kind."""
    return """
service: mystack
provider:
  stage: dev
  ssot: false
functions:
  watcher:
    name: Watcher
    path: ./autotasks/watcher
    relayer: main
    trigger:
      type: schedule
      frequency: 10
resources:
  Resources:
    secrets:
      api-token: s3cr3t
    contracts:
      box:
        name: Box
        network: goerli
        address: "0x0000000000000000000000000000000000000001"
    relayers:
      main:
        name: Main Relayer
        network: goerli
        min-balance: 1000
        api-keys:
          - a
          - b
    notifications:
      ops-email:
        type: email
        name: Ops
        config:
          emails:
            - ops@example.com
    sentinels:
      box-watch:
        name: Box Watch
        network: goerli
        addresses:
          - "0x0000000000000000000000000000000000000001"
        notify-config:
          channels:
            - ops-email
"""
