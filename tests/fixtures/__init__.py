"""Test fixtures for access control tests."""

from unittest.mock import MagicMock

import pytest

from roleacl import Acl
from roleacl.config import EngineConfig


@pytest.fixture
def acl():
    """Create an empty access control list."""
    return Acl()


@pytest.fixture
def quiet_acl():
    """Create an access control list that does not log mutations."""
    return Acl(EngineConfig(log_mutations=False))


@pytest.fixture
def site_acl():
    """
    Create a populated access control list for a news and forum site.

    guest <- member <- news_admin  <- admin
                    <- forum_admin <-
    """
    acl = Acl()

    acl.add_role("guest")
    acl.add_role("member", ["guest"])
    acl.add_role("news_admin", ["member"])
    acl.add_role("forum_admin", "member")
    acl.add_role("admin", ["news_admin", "forum_admin"])

    acl.allow("guest", ["news.read", "forum.read", "profile.create"])
    acl.allow("member", ["forum.create"])
    acl.allow("news_admin", ["news.create", "news.update"])
    acl.allow("forum_admin", "forum.update")
    acl.allow("admin")

    acl.deny("member", "profile.create")

    return acl


@pytest.fixture
def chain_acl():
    """Create a guest -> member -> admin inheritance chain."""
    acl = Acl()
    acl.add_role("guest")
    acl.add_role("member", ["guest"])
    acl.add_role("admin", ["member"])
    return acl


@pytest.fixture
def condition_true():
    """Create a condition callback that always holds."""
    return MagicMock(return_value=True)


@pytest.fixture
def condition_false():
    """Create a condition callback that never holds."""
    return MagicMock(return_value=False)
