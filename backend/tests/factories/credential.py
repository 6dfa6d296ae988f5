"""Factory Boy definition for :class:`passport.models.credential.Credential`."""

from __future__ import annotations

import factory
from passport.models.base import utcnow
from passport.models.credential import Credential

from tests.factories import BaseFactory


class CredentialFactory(BaseFactory):
    """Build persisted passports; each holder/issuer pair is unique by default."""

    class Meta:
        model = Credential

    id = None  # let autoincrement handle it
    holder_id = factory.Sequence(lambda n: f"user-{n}")
    issuer_id = factory.Sequence(lambda n: f"srv-issuer-{n}")
    issued_at = factory.LazyFunction(utcnow)
    issued_by_id = factory.Sequence(lambda n: f"admin-{n}")
