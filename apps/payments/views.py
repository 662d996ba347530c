from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from core.callers import AuthenticatedCaller
from .serializers import PaymentSerializer
from .services import list_payments_for


class MyPaymentsView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Payments the authenticated user made or received, newest first.",
        responses={200: PaymentSerializer(many=True), 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        payments = list_payments_for(AuthenticatedCaller.from_user(request.user))
        return Response(PaymentSerializer(payments, many=True).data)
