# JWT 발급 시 role / college_id claim 포함 (프론트 화면 분기용, 권한 판단은 서버에서 다시)
from __future__ import annotations

from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.views import TokenObtainPairView

from academy.domain.assessment.roles import Role


class RoleClaimTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["role"] = Role.parse(getattr(user, "role", None)).value
        token["college_id"] = getattr(user, "college_id", None)
        return token


class RoleClaimTokenObtainPairView(TokenObtainPairView):
    serializer_class = RoleClaimTokenObtainPairSerializer
