"""
Denial Guidance

Maps a verification denial reason to the guidance shown to the user.
"""
from dataclasses import asdict, dataclass

DEFAULT_DENIAL_REASON = 'VERIFICATION_FAILED'
DEFAULT_DENIAL_DETAILS = 'Your identity verification was not successful.'
FALLBACK_DENIAL_DETAILS = 'Your identity verification was not successful. Please try again.'


@dataclass(frozen=True)
class GuidanceCard:
    title: str
    description: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class DenialInfo:
    reason: str = DEFAULT_DENIAL_REASON
    details: str = DEFAULT_DENIAL_DETAILS

    @property
    def guidance(self) -> GuidanceCard:
        return guidance_for(self.reason)

    def to_dict(self) -> dict:
        return {
            'reason': self.reason,
            'details': self.details,
            'guidance': self.guidance.to_dict(),
        }


DEFAULT_GUIDANCE = GuidanceCard(
    title='Verification Failed',
    description=(
        'We were unable to verify your identity. Please review your information '
        'and try again, or contact support for assistance.'
    ),
)

GUIDANCE_CARDS = {
    'DOCUMENT_ISSUE': GuidanceCard(
        title='Document Issue',
        description=(
            'Please re-upload clear photos of your government-issued ID. Make sure '
            'all four corners are visible and the text is legible.'
        ),
    ),
    'INFO_MISMATCH': GuidanceCard(
        title='Information Mismatch',
        description=(
            'The information you provided does not match your identity documents. '
            'Please review and correct your personal details.'
        ),
    ),
}


def guidance_for(reason: str | None) -> GuidanceCard:
    return GUIDANCE_CARDS.get(reason or '', DEFAULT_GUIDANCE)
