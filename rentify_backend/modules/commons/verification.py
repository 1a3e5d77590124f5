"""Verification status shared by landlord and tenant profiles."""

import enum

from ...core.state_machine import StatusMachine


class VerificationStatus(str, enum.Enum):
    UNVERIFIED = "unverified"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


verification_machine = StatusMachine(
    "verification status",
    {
        VerificationStatus.UNVERIFIED: {
            VerificationStatus.PENDING,
            VerificationStatus.VERIFIED,
            VerificationStatus.REJECTED,
        },
        VerificationStatus.PENDING: {
            VerificationStatus.VERIFIED,
            VerificationStatus.REJECTED,
            VerificationStatus.UNVERIFIED,
        },
        VerificationStatus.VERIFIED: {
            VerificationStatus.PENDING,
            VerificationStatus.REJECTED,
        },
        VerificationStatus.REJECTED: {
            VerificationStatus.PENDING,
            VerificationStatus.UNVERIFIED,
        },
    },
)
