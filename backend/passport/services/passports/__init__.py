from .dto import (
    AddAutoIssueRuleIn,
    AddPolicyIn,
    AutoIssueRuleOut,
    IssuePassportIn,
    PassportOut,
    PolicyOut,
    ServerInfoOut,
)
from .service import PassportService

__all__ = [
    "AddAutoIssueRuleIn",
    "AddPolicyIn",
    "AutoIssueRuleOut",
    "IssuePassportIn",
    "PassportOut",
    "PassportService",
    "PolicyOut",
    "ServerInfoOut",
]
