"""Unit tests for tenant-name derivation."""

from __future__ import annotations

import types

import pytest

from tenantry.reconciliation.naming import (
    derive_tenant_name,
    email_domain,
    target_tenant_name,
)


class TestEmailDomain:
    """Tests for email_domain."""

    @pytest.mark.parametrize(
        ("email", "expected"),
        [
            ("alice@Acme.io", "acme.io"),
            ("bob@sub.example.co.uk", "sub.example.co.uk"),
            ("x@a", "a"),
        ],
    )
    def test_usable_addresses(self, email: str, expected: str) -> None:
        """The domain is returned lowercased."""
        assert email_domain(email) == expected

    @pytest.mark.parametrize(
        "email",
        [None, "", "no-at-sign", "@acme.io", "alice@", "alice@.io"],
    )
    def test_unusable_addresses(self, email: str | None) -> None:
        """Addresses without a local part or first label are rejected."""
        assert email_domain(email) is None


class TestDeriveTenantName:
    """Tests for derive_tenant_name."""

    @pytest.mark.parametrize(
        ("email", "expected"),
        [
            ("alice@acme.io", "Acme"),
            ("alice@ACME.io", "Acme"),
            ("x@a.b.c", "A"),
            ("ops@mcKinsey.com", "Mckinsey"),
        ],
    )
    def test_first_label_capitalised(self, email: str, expected: str) -> None:
        """Only the first character of the first label is uppercased."""
        assert derive_tenant_name(email) == expected

    def test_unusable_email_raises(self) -> None:
        """Derivation refuses addresses with no domain."""
        with pytest.raises(ValueError, match="cannot derive"):
            derive_tenant_name("alice@")


class TestTargetTenantName:
    """Precedence between declared names, overrides and derivation."""

    overrides = types.MappingProxyType({"gmail.com": "Personal"})

    def test_declared_name_wins(self) -> None:
        """A declared name beats an override."""
        name = target_tenant_name(
            "a@gmail.com", declared_name="Chosen", overrides=self.overrides
        )
        assert name == "Chosen"

    def test_override_beats_derivation(self) -> None:
        """Mapped domains use their fixed name."""
        assert target_tenant_name("a@Gmail.com", overrides=self.overrides) == "Personal"

    def test_derivation_is_the_fallback(self) -> None:
        """Unmapped domains are derived."""
        assert target_tenant_name("a@initech.com", overrides=self.overrides) == (
            "Initech"
        )
