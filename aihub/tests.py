import json
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.core.exceptions import PermissionDenied
from django.test import RequestFactory, TestCase
from django.urls import reverse

from .services.ai.router import AIRouter
from .services.ai.schemas import ProviderId
from .services.base import ServiceNotConfigured
from .views import GENERIC_FAILURE, ChatView


def _openai_client(text='Jesienny wiersz', prompt_tokens=10, completion_tokens=40):
    client = MagicMock()
    client.chat.completions.create.return_value = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=text))],
        usage=SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens),
    )
    return client


class ChatViewTest(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.user = get_user_model().objects.create_user(username='anna', password='secret-pass')
        self.general = _openai_client()
        self.reasoning = _openai_client()
        self.router = AIRouter.from_clients({
            ProviderId.GENERAL: self.general,
            ProviderId.REASONING: self.reasoning,
        })

    def _post(self, payload, user=None, router=None):
        body = payload if isinstance(payload, (str, bytes)) else json.dumps(payload)
        request = self.factory.post(reverse('aihub:ai-chat'), data=body, content_type='application/json')
        request.user = user or self.user
        return ChatView.as_view(router=router or self.router)(request)

    def test_routes_and_returns_ai_response(self):
        response = self._post({'messages': [{'role': 'user', 'content': 'Napisz wiersz o jesieni'}]})
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.content)
        self.assertEqual(data['provider'], 'general')
        self.assertEqual(data['model'], 'gpt-4o')
        self.assertEqual(data['content'], 'Jesienny wiersz')
        self.assertEqual(data['tokensUsed'], {'input': 10, 'output': 40, 'total': 50})
        self.assertAlmostEqual(data['cost'], 0.000425, places=12)

    def test_options_are_applied(self):
        response = self._post({
            'messages': [{'role': 'user', 'content': 'Napisz wiersz'}],
            'options': {'provider': 'reasoning', 'maxTokens': 50},
        })
        self.assertEqual(response.status_code, 200)
        self.assertEqual(json.loads(response.content)['provider'], 'reasoning')
        kwargs = self.reasoning.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs['max_tokens'], 50)
        self.general.chat.completions.create.assert_not_called()

    def test_invalid_json_returns_400(self):
        self.assertEqual(self._post('{not json').status_code, 400)

    def test_missing_messages_returns_400(self):
        self.assertEqual(self._post({'options': {}}).status_code, 400)

    def test_unknown_role_returns_400(self):
        response = self._post({'messages': [{'role': 'tool', 'content': 'x'}]})
        self.assertEqual(response.status_code, 400)

    def test_out_of_range_temperature_returns_400(self):
        response = self._post({
            'messages': [{'role': 'user', 'content': 'x'}],
            'options': {'temperature': 3},
        })
        self.assertEqual(response.status_code, 400)

    def test_non_text_system_prompt_returns_400_without_calling_upstream(self):
        response = self._post({
            'messages': [{'role': 'user', 'content': 'hej'}],
            'options': {'systemPrompt': 5, 'stream': 'nope'},
        })
        self.assertEqual(response.status_code, 400)
        self.reasoning.chat.completions.create.assert_not_called()

    def test_upstream_failure_returns_generic_502(self):
        self.reasoning.chat.completions.create.side_effect = ConnectionError('secret upstream detail')
        with self.assertLogs('aihub.services.ai.router', level='ERROR'):
            response = self._post({'messages': [{'role': 'user', 'content': 'hej'}]})
        self.assertEqual(response.status_code, 502)
        data = json.loads(response.content)
        self.assertEqual(data['error'], GENERIC_FAILURE)
        self.assertNotIn('secret', response.content.decode())

    def test_provider_without_adapter_returns_503(self):
        response = self._post({
            'messages': [{'role': 'user', 'content': 'hej'}],
            'options': {'provider': 'safety'},
        })
        self.assertEqual(response.status_code, 503)

    def test_unconfigured_default_router_returns_503(self):
        request = self.factory.post(
            reverse('aihub:ai-chat'),
            data=json.dumps({'messages': [{'role': 'user', 'content': 'hej'}]}),
            content_type='application/json',
        )
        request.user = self.user
        with patch('aihub.views.get_router', side_effect=ServiceNotConfigured('no keys')):
            response = ChatView.as_view()(request)
        self.assertEqual(response.status_code, 503)

    def test_anonymous_user_is_rejected(self):
        request = self.factory.post(reverse('aihub:ai-chat'), data='{}', content_type='application/json')
        request.user = AnonymousUser()
        with self.assertRaises(PermissionDenied):
            ChatView.as_view(router=self.router)(request)

    def test_anonymous_request_through_client_is_forbidden(self):
        response = self.client.post(reverse('aihub:ai-chat'), data='{}', content_type='application/json')
        self.assertEqual(response.status_code, 403)
