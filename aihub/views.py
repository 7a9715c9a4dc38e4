import json
import logging

from django.contrib.auth.mixins import LoginRequiredMixin
from django.http import JsonResponse
from django.views import View

from .services.ai.base_provider import as_messages
from .services.ai.router import get_router
from .services.ai.schemas import RequestOptions
from .services.base import ServiceNotConfigured, UpstreamError

logger = logging.getLogger(__name__)

GENERIC_FAILURE = 'AI request failed, try again.'


class ChatView(LoginRequiredMixin, View):
    """JSON endpoint: ``{"messages": [...], "options": {...}}`` -> AIResponse."""

    raise_exception = True
    # Injected through ``as_view(router=...)``; defaults to the settings-built router.
    router = None

    def get_router(self):
        return self.router or get_router()

    def post(self, request):
        try:
            payload = json.loads(request.body or b'{}')
            if not isinstance(payload, dict) or not isinstance(payload.get('messages'), list):
                raise ValueError('"messages" must be a list')
            messages = as_messages(payload['messages'])
            options = RequestOptions.from_dict(payload.get('options'))
        except (ValueError, TypeError, AttributeError) as exc:
            logger.debug('Rejected AI chat request from %s: %s', request.user, exc)
            return JsonResponse({'error': f'Invalid request: {exc}'}, status=400)

        try:
            response = self.get_router().route(messages, options)
        except UpstreamError:
            # already logged with provider/model by the router
            return JsonResponse({'error': GENERIC_FAILURE}, status=502)
        except ServiceNotConfigured as exc:
            logger.error('AI service not configured: %s', exc)
            return JsonResponse({'error': GENERIC_FAILURE}, status=503)

        return JsonResponse(response.to_dict())
