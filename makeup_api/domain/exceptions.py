from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class BillingError(DomainError):
    """Stripe call failed or returned an unusable payload."""


class BillingCustomerNotFoundError(DomainError):
    """No Stripe customer matches the user's email."""


class BillingInputError(DomainError):
    """Required billing parameters are missing."""


class WebhookVerificationError(DomainError):
    """Stripe webhook signature could not be verified."""


class IdentityProviderError(DomainError):
    """Supabase auth call failed."""


class ProfileLookupError(DomainError):
    """Profile row could not be read."""


class SubscriptionStoreError(DomainError):
    """Subscription state could not be written."""


class ProfileNotFoundError(DomainError):
    """No profile row exists for the user."""


class UsageLimitExceededError(DomainError):
    """Free plan monthly analysis quota is used up."""


class UsageStoreError(DomainError):
    """Usage counters could not be written."""
