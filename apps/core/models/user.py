from django.db import models
from django.contrib.auth.models import AbstractUser, Group, Permission

from academy.domain.assessment.roles import Capabilities, Role, capabilities_for


# --------------------------------------------------
# Custom User (AUTH_USER_MODEL)
# --------------------------------------------------

class User(AbstractUser):
    """
    Custom User 모델
    - AUTH_USER_MODEL = core.User
    - role: 권한 판단은 capabilities 로만 (역할 문자열 직접 비교 금지)
    - college: ROOTADMIN / SUPERADMIN 은 없음
    """

    ROLE_CHOICES = [(r.value, r.value.title()) for r in Role]

    name = models.CharField(max_length=50, blank=True, null=True)

    role = models.CharField(
        max_length=20,
        choices=ROLE_CHOICES,
        default=Role.STUDENT.value,
    )

    college = models.ForeignKey(
        "core.College",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users",
    )

    # auth.User 와 reverse accessor 충돌 방지
    groups = models.ManyToManyField(
        Group,
        related_name="core_users",
        blank=True,
    )
    user_permissions = models.ManyToManyField(
        Permission,
        related_name="core_users",
        blank=True,
    )

    class Meta:
        app_label = "core"
        db_table = "accounts_user"
        ordering = ["-id"]

    def __str__(self):
        return self.username

    @property
    def role_enum(self) -> Role:
        return Role.parse(self.role)

    @property
    def capabilities(self) -> Capabilities:
        return capabilities_for(self.role_enum)
