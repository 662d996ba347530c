from dataclasses import dataclass

from core.constants import JOB_POSTER, FREELANCER
from core.exceptions import NotAuthorized


@dataclass(frozen=True)
class AuthenticatedCaller:
    """Identity and role of the user on whose behalf a core operation runs.

    Built once per request (or websocket frame) by the outer layer and passed
    explicitly into the job, bid, payment and chat services.
    """
    id: int
    role: str

    @classmethod
    def from_user(cls, user):
        if getattr(user, 'is_job_poster', False):
            return cls(id=user.pk, role=JOB_POSTER)
        if getattr(user, 'is_freelancer', False):
            return cls(id=user.pk, role=FREELANCER)
        raise NotAuthorized("Account has no job poster or freelancer profile.")

    @property
    def is_job_poster(self):
        return self.role == JOB_POSTER

    @property
    def is_freelancer(self):
        return self.role == FREELANCER

    def require_job_poster(self, message="Only job posters can perform this action."):
        if not self.is_job_poster:
            raise NotAuthorized(message)

    def require_freelancer(self, message="Only freelancers can perform this action."):
        if not self.is_freelancer:
            raise NotAuthorized(message)
