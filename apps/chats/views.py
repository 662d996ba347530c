from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from core.callers import AuthenticatedCaller
from . import services
from .serializers import (
    ChatSummarySerializer, ChatDetailSerializer, MessageSerializer, MessageCreateSerializer
)


class ChatListView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Conversations the authenticated user takes part in, most recently active first.",
        responses={200: ChatSummarySerializer(many=True), 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        chats = services.list_chats_for(AuthenticatedCaller.from_user(request.user))
        return Response(ChatSummarySerializer(chats, many=True).data)


class ChatDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Full conversation. Messages from the other participant are marked as read.",
        responses={200: ChatDetailSerializer, 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'}
    )
    def get(self, request, id):
        chat = services.get_chat(id, AuthenticatedCaller.from_user(request.user))
        return Response(ChatDetailSerializer(chat).data)


class ChatMessageCreateView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Append a message to a conversation you take part in.",
        request_body=MessageCreateSerializer,
        responses={201: MessageSerializer, 400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'}
    )
    def post(self, request, id):
        serializer = MessageCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        message = services.append_message(
            id, AuthenticatedCaller.from_user(request.user), serializer.validated_data['content']
        )
        return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)


class ChatReadView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Mark the other participant's messages as read.",
        responses={
            200: openapi.Response(
                description='Number of messages marked as read',
                schema=openapi.Schema(
                    type=openapi.TYPE_OBJECT,
                    properties={'updated': openapi.Schema(type=openapi.TYPE_INTEGER)}
                )
            ),
            401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'
        }
    )
    def patch(self, request, id):
        updated = services.mark_read(id, AuthenticatedCaller.from_user(request.user))
        return Response({'updated': updated})
