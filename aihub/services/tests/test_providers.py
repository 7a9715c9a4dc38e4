"""
Unit tests for the provider adapters, using stub SDK clients (no live API calls).
"""

import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock

from aihub.services.ai.anthropic_provider import AnthropicProvider
from aihub.services.ai.base_provider import split_system
from aihub.services.ai.gemini_provider import GeminiProvider, build_chat_turn
from aihub.services.ai.openai_provider import DeepSeekProvider, OpenAIProvider
from aihub.services.ai.schemas import Message, ProviderId, RequestOptions, Role
from aihub.services.base import UpstreamError


def _msgs(*pairs):
    return [Message(role, content) for role, content in pairs]


# ---------------------------------------------------------------------------
# Stub replies in each upstream's native shape
# ---------------------------------------------------------------------------

def _anthropic_reply(text='Hello', input_tokens=11, output_tokens=7, blocks=None):
    if blocks is None:
        blocks = [SimpleNamespace(type='text', text=text)]
    usage = SimpleNamespace(input_tokens=input_tokens, output_tokens=output_tokens)
    return SimpleNamespace(content=blocks, usage=usage)


def _openai_reply(text='Hello', prompt_tokens=11, completion_tokens=7, usage=True):
    choice = SimpleNamespace(message=SimpleNamespace(content=text))
    usage_obj = (
        SimpleNamespace(prompt_tokens=prompt_tokens, completion_tokens=completion_tokens)
        if usage else None
    )
    return SimpleNamespace(choices=[choice], usage=usage_obj)


def _gemini_reply(text='Hello', prompt_tokens=11, candidate_tokens=7, usage=True):
    meta = (
        SimpleNamespace(prompt_token_count=prompt_tokens, candidates_token_count=candidate_tokens)
        if usage else None
    )
    return SimpleNamespace(text=text, usage_metadata=meta)


class TestSplitSystem(unittest.TestCase):
    def test_no_system_content_gives_none(self):
        system, conversation = split_system(_msgs((Role.USER, 'hi')))
        self.assertIsNone(system)
        self.assertEqual(len(conversation), 1)

    def test_system_messages_are_joined_with_newlines(self):
        messages = _msgs((Role.SYSTEM, 'one'), (Role.USER, 'hi'), (Role.SYSTEM, 'two'))
        system, conversation = split_system(messages)
        self.assertEqual(system, 'one\ntwo')
        self.assertEqual([m.content for m in conversation], ['hi'])

    def test_system_prompt_option_comes_first(self):
        system, _ = split_system(_msgs((Role.SYSTEM, 'rules')), system_prompt='persona')
        self.assertEqual(system, 'persona\nrules')


# ---------------------------------------------------------------------------
# Anthropic (safety)
# ---------------------------------------------------------------------------

class TestAnthropicProvider(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.client.messages.create.return_value = _anthropic_reply()
        self.provider = AnthropicProvider(self.client)

    def test_system_is_sent_as_separate_field(self):
        messages = _msgs((Role.SYSTEM, 'Be careful.'), (Role.USER, 'Hi'), (Role.ASSISTANT, 'Hello'), (Role.USER, 'Q'))
        self.provider.call(messages)
        kwargs = self.client.messages.create.call_args.kwargs
        self.assertEqual(kwargs['system'], 'Be careful.')
        self.assertEqual(kwargs['messages'], [
            {'role': 'user', 'content': 'Hi'},
            {'role': 'assistant', 'content': 'Hello'},
            {'role': 'user', 'content': 'Q'},
        ])

    def test_system_field_omitted_without_system_content(self):
        self.provider.call(_msgs((Role.USER, 'Hi')))
        self.assertNotIn('system', self.client.messages.create.call_args.kwargs)

    def test_defaults_forwarded(self):
        self.provider.call(_msgs((Role.USER, 'Hi')))
        kwargs = self.client.messages.create.call_args.kwargs
        self.assertEqual(kwargs['model'], 'claude-sonnet-4-20250514')
        self.assertEqual(kwargs['max_tokens'], 4096)
        self.assertEqual(kwargs['temperature'], 0.7)

    def test_response_is_normalised_with_cost(self):
        response = self.provider.call(_msgs((Role.USER, 'Hi')))
        self.assertEqual(response.content, 'Hello')
        self.assertEqual(response.provider, ProviderId.SAFETY)
        self.assertEqual(response.tokens_used.input, 11)
        self.assertEqual(response.tokens_used.output, 7)
        self.assertEqual(response.tokens_used.total, 18)
        self.assertAlmostEqual(response.cost, (11 * 3 + 7 * 15) / 1_000_000)

    def test_non_text_block_yields_empty_content(self):
        self.client.messages.create.return_value = _anthropic_reply(
            blocks=[SimpleNamespace(type='tool_use', text=None)]
        )
        response = self.provider.call(_msgs((Role.USER, 'Hi')))
        self.assertEqual(response.content, '')

    def test_empty_reply_yields_empty_content(self):
        self.client.messages.create.return_value = _anthropic_reply(blocks=[])
        self.assertEqual(self.provider.call(_msgs((Role.USER, 'Hi'))).content, '')

    def test_transport_error_is_wrapped(self):
        boom = ConnectionError('connection reset')
        self.client.messages.create.side_effect = boom
        with self.assertRaises(UpstreamError) as ctx:
            self.provider.call(_msgs((Role.USER, 'Hi')), RequestOptions(tier='fast'))
        self.assertEqual(ctx.exception.provider, ProviderId.SAFETY)
        self.assertEqual(ctx.exception.model, 'claude-3-5-haiku-20241022')
        self.assertIs(ctx.exception.cause, boom)
        self.assertIs(ctx.exception.__cause__, boom)


# ---------------------------------------------------------------------------
# OpenAI (general) and DeepSeek (reasoning)
# ---------------------------------------------------------------------------

class TestOpenAIProvider(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.client.chat.completions.create.return_value = _openai_reply()
        self.provider = OpenAIProvider(self.client)

    def test_full_message_list_is_sent(self):
        messages = _msgs((Role.SYSTEM, 'sys'), (Role.USER, 'a'), (Role.ASSISTANT, 'b'), (Role.USER, 'c'))
        self.provider.call(messages)
        kwargs = self.client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs['messages'], [m.to_dict() for m in messages])
        self.assertEqual(kwargs['model'], 'gpt-4o')

    def test_system_prompt_option_is_prepended(self):
        self.provider.call(_msgs((Role.USER, 'a')), RequestOptions(system_prompt='persona'))
        sent = self.client.chat.completions.create.call_args.kwargs['messages']
        self.assertEqual(sent[0], {'role': 'system', 'content': 'persona'})
        self.assertEqual(sent[1], {'role': 'user', 'content': 'a'})

    def test_explicit_model_and_sampling_options(self):
        self.provider.call(
            _msgs((Role.USER, 'a')),
            RequestOptions(model='gpt-4o-mini', max_tokens=100, temperature=0),
        )
        kwargs = self.client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs['model'], 'gpt-4o-mini')
        self.assertEqual(kwargs['max_tokens'], 100)
        self.assertEqual(kwargs['temperature'], 0)

    def test_missing_usage_counts_as_zero(self):
        self.client.chat.completions.create.return_value = _openai_reply(usage=False)
        response = self.provider.call(_msgs((Role.USER, 'a')))
        self.assertEqual(response.tokens_used.total, 0)
        self.assertEqual(response.cost, 0.0)

    def test_negative_usage_is_a_malformed_reply(self):
        self.client.chat.completions.create.return_value = _openai_reply(prompt_tokens=-5, completion_tokens=3)
        with self.assertRaises(UpstreamError) as ctx:
            self.provider.call(_msgs((Role.USER, 'a')))
        self.assertEqual(ctx.exception.provider, ProviderId.GENERAL)
        self.assertIsInstance(ctx.exception.cause, ValueError)

    def test_null_content_becomes_empty_string(self):
        self.client.chat.completions.create.return_value = _openai_reply(text=None)
        self.assertEqual(self.provider.call(_msgs((Role.USER, 'a'))).content, '')

    def test_malformed_payload_is_wrapped(self):
        self.client.chat.completions.create.return_value = SimpleNamespace(usage=None)
        with self.assertRaises(UpstreamError) as ctx:
            self.provider.call(_msgs((Role.USER, 'a')))
        self.assertIsInstance(ctx.exception.cause, AttributeError)

    def test_unpriced_model_uses_provider_default_price(self):
        self.client.chat.completions.create.return_value = _openai_reply(prompt_tokens=1000, completion_tokens=1000)
        with self.assertLogs('aihub.services.ai.pricing', level='WARNING'):
            response = self.provider.call(_msgs((Role.USER, 'a')), RequestOptions(model='gpt-5-preview'))
        self.assertAlmostEqual(response.cost, (1000 * 2.5 + 1000 * 10) / 1_000_000)


class TestDeepSeekProvider(unittest.TestCase):
    def test_reasoning_defaults_and_pricing(self):
        client = MagicMock()
        client.chat.completions.create.return_value = _openai_reply(prompt_tokens=100, completion_tokens=200)
        response = DeepSeekProvider(client).call(_msgs((Role.USER, 'a')), RequestOptions(tier='powerful'))
        self.assertEqual(response.provider, ProviderId.REASONING)
        self.assertEqual(response.model, 'deepseek-reasoner')
        self.assertAlmostEqual(response.cost, (100 * 0.55 + 200 * 2.19) / 1_000_000)


# ---------------------------------------------------------------------------
# Gemini (multimodal)
# ---------------------------------------------------------------------------

class TestGeminiChatTurn(unittest.TestCase):
    def test_history_and_turn(self):
        history, turn = build_chat_turn(_msgs((Role.USER, 'a'), (Role.ASSISTANT, 'b'), (Role.USER, 'c')))
        self.assertEqual(history, [
            {'role': 'user', 'parts': [{'text': 'a'}]},
            {'role': 'model', 'parts': [{'text': 'b'}]},
        ])
        self.assertEqual(turn, 'c')

    def test_empty_conversation(self):
        self.assertEqual(build_chat_turn([]), ([], ''))


class TestGeminiProvider(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.chat = self.client.chats.create.return_value
        self.chat.send_message.return_value = _gemini_reply()
        self.provider = GeminiProvider(self.client)

    def test_submits_history_and_last_message_only(self):
        self.provider.call(_msgs((Role.USER, 'a'), (Role.ASSISTANT, 'b'), (Role.USER, 'c')))
        kwargs = self.client.chats.create.call_args.kwargs
        self.assertEqual(kwargs['model'], 'gemini-1.5-pro')
        self.assertEqual(kwargs['history'], [
            {'role': 'user', 'parts': [{'text': 'a'}]},
            {'role': 'model', 'parts': [{'text': 'b'}]},
        ])
        self.chat.send_message.assert_called_once_with('c')

    def test_system_messages_become_system_instruction(self):
        self.provider.call(_msgs((Role.SYSTEM, 'sys'), (Role.USER, 'a'), (Role.USER, 'b')))
        kwargs = self.client.chats.create.call_args.kwargs
        self.assertEqual(kwargs['config']['system_instruction'], 'sys')
        self.assertEqual(kwargs['history'], [{'role': 'user', 'parts': [{'text': 'a'}]}])
        self.chat.send_message.assert_called_once_with('b')

    def test_sampling_options_in_config(self):
        self.provider.call(_msgs((Role.USER, 'a')), RequestOptions(max_tokens=64, temperature=1.5))
        config = self.client.chats.create.call_args.kwargs['config']
        self.assertEqual(config['max_output_tokens'], 64)
        self.assertEqual(config['temperature'], 1.5)
        self.assertNotIn('system_instruction', config)

    def test_usage_and_cost(self):
        response = self.provider.call(_msgs((Role.USER, 'a')), RequestOptions(tier='fast'))
        self.assertEqual(response.provider, ProviderId.MULTIMODAL)
        self.assertEqual(response.model, 'gemini-1.5-flash')
        self.assertEqual(response.tokens_used.total, 18)
        self.assertAlmostEqual(response.cost, (11 * 0.075 + 7 * 0.3) / 1_000_000)

    def test_missing_usage_metadata(self):
        self.chat.send_message.return_value = _gemini_reply(text=None, usage=False)
        response = self.provider.call(_msgs((Role.USER, 'a')))
        self.assertEqual(response.content, '')
        self.assertEqual(response.tokens_used.input, 0)
        self.assertEqual(response.tokens_used.output, 0)

    def test_send_failure_is_wrapped(self):
        self.chat.send_message.side_effect = TimeoutError('deadline exceeded')
        with self.assertRaises(UpstreamError) as ctx:
            self.provider.call(_msgs((Role.USER, 'a')))
        self.assertEqual(ctx.exception.provider, ProviderId.MULTIMODAL)
        self.assertEqual(ctx.exception.model, 'gemini-1.5-pro')
