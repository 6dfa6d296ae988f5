"""Repository package exposing persistence-layer access for the credential store."""

from __future__ import annotations

from passport.repositories.acceptance_policy import AcceptancePolicyRepository
from passport.repositories.auto_issue_rule import AutoIssueRuleRepository
from passport.repositories.base import BaseRepository
from passport.repositories.credential import CredentialRepository
from passport.repositories.delegated_token import DelegatedTokenRepository

__all__ = [
    "BaseRepository",
    "AcceptancePolicyRepository",
    "AutoIssueRuleRepository",
    "CredentialRepository",
    "DelegatedTokenRepository",
]
