from rest_framework.permissions import AllowAny
from rest_framework.renderers import JSONRenderer
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from role_user_manager.ajax import dispatch
from role_user_manager.auth import NonceSessionAuthentication


class AjaxDispatchView(APIView):
    """
    Single entry point of the browser scripts. The action name is posted with its parameters,
    the response is always a {success, data, message} envelope.
    Access is checked per action by the registry, not by DRF permissions.
    """

    authentication_classes = [NonceSessionAuthentication]
    permission_classes = [AllowAny]
    renderer_classes = [JSONRenderer]

    def post(self, request: Request):
        return Response(dispatch(request.data.get("action"), request.user, request.data))
