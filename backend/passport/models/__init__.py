"""SQLAlchemy models backing the credential store.

Importing this package registers every table on the shared metadata so that
Flask-Migrate and ``db.create_all()`` see the full schema.
"""

from __future__ import annotations

from .acceptance_policy import AcceptancePolicy
from .auto_issue_rule import AutoIssueRule
from .credential import Credential
from .delegated_token import DelegatedToken

__all__ = ["AcceptancePolicy", "AutoIssueRule", "Credential", "DelegatedToken"]
