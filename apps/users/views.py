from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from .serializers import UserSerializer


class CurrentUserView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Return the authenticated account with its role and running balance.",
        responses={200: UserSerializer, 401: 'Unauthorized'}
    )
    def get(self, request):
        serializer = UserSerializer(request.user)
        return Response(serializer.data)
