from django.urls import path
from .views import ChatListView, ChatDetailView, ChatMessageCreateView, ChatReadView

urlpatterns = [
    path('chats/', ChatListView.as_view(), name='chat_list'),
    path('chats/<int:id>/', ChatDetailView.as_view(), name='chat_detail'),
    path('chats/<int:id>/messages/', ChatMessageCreateView.as_view(), name='chat_message_create'),
    path('chats/<int:id>/read/', ChatReadView.as_view(), name='chat_read'),
]
