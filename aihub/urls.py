from django.urls import path

from . import views

app_name = 'aihub'

urlpatterns = [
    path('api/ai/chat/', views.ChatView.as_view(), name='ai-chat'),
]
