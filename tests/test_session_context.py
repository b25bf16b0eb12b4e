import pytest
from rest_framework.response import Response
from rest_framework.test import APIRequestFactory, force_authenticate
from rest_framework.views import APIView

from academy.domain.assessment.roles import Role
from apps.core.session import (
    SessionContextMixin,
    clear_current_session,
    get_current_session,
    session_from_user,
    set_current_session,
)

pytestmark = pytest.mark.django_db


class EchoSessionView(SessionContextMixin, APIView):
    seen = None

    def get(self, request):
        EchoSessionView.seen = get_current_session()
        return Response({"user_id": self.session.user_id, "role": self.session.role.value})


class TestSessionContext:
    def test_built_from_user(self, make_user, college):
        user = make_user("prof", Role.FACULTY)
        ctx = session_from_user(user)
        assert ctx.user_id == user.pk
        assert ctx.role is Role.FACULTY
        assert ctx.college_id == college.id

    def test_set_for_request_and_cleared_after(self, make_user):
        user = make_user("student")
        request = APIRequestFactory().get("/echo/")
        force_authenticate(request, user=user)

        response = EchoSessionView.as_view()(request)

        assert response.status_code == 200
        assert response.data == {"user_id": user.pk, "role": "STUDENT"}
        assert EchoSessionView.seen.user_id == user.pk
        assert get_current_session() is None

    def test_cleared_on_unauthenticated_response(self, make_user):
        set_current_session(session_from_user(make_user("stale")))
        response = EchoSessionView.as_view()(APIRequestFactory().get("/echo/"))

        assert response.status_code in (401, 403)
        assert get_current_session() is None
        clear_current_session()
