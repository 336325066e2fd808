"""Tests for the model fallback adapter."""

import asyncio
import json
import os
import unittest
from unittest.mock import patch

import httpx

from triagem.services.ai.classify.contracts import Intent, ModelUnavailable
from triagem.services.ai.classify.fallback import ModelFallbackAdapter, classify_via_model
from triagem.services.ai.classify.prompt import build_prompt
from triagem.services.ai.common.providers.base import BaseProvider, ProviderResult
from triagem.services.ai.common.providers.mock import MockProvider

VALID_BILLING = {
    "intent": "BILLING",
    "confidence": 0.9,
    "entities": [{"type": "product_or_plan", "value": "serviço"}],
    "should_reply": True,
    "reply_hint": "Informar valores dos planos.",
}


class RecordingProvider(BaseProvider):
    """Returns a fixed raw text and records what it was asked."""

    name = "recording"

    def __init__(self, raw_text):
        self.raw_text = raw_text
        self.calls = []

    async def generate(self, prompt, *, response_schema=None, model="", temperature=None, max_tokens=1024, timeout_seconds=8.0):
        self.calls.append({"prompt": prompt, "response_schema": response_schema, "timeout_seconds": timeout_seconds})
        return ProviderResult(raw_text=self.raw_text, model=model or "rec-1", provider=self.name)


class FailingProvider(BaseProvider):
    name = "failing"

    def __init__(self, exc):
        self.exc = exc

    async def generate(self, prompt, **kwargs):
        raise self.exc


class SlowProvider(BaseProvider):
    name = "slow"

    async def generate(self, prompt, **kwargs):
        await asyncio.sleep(5)
        return ProviderResult(raw_text=json.dumps(VALID_BILLING), model="slow", provider=self.name)


class PromptTests(unittest.TestCase):
    def test_prompt_embeds_message_and_taxonomy(self):
        prompt = build_prompt("Qual o valor do serviço?")
        self.assertIn("Qual o valor do serviço?", prompt)
        for intent in Intent:
            self.assertIn(intent.value, prompt)
        for entity_type in ("action", "product_or_plan", "payment_method", "date", "time", "order_id", "error_signal"):
            self.assertIn(entity_type, prompt)
        self.assertIn('reply_hint = ""', prompt)
        self.assertIn("should_reply = false", prompt)

    def test_prompt_survives_braces_in_message(self):
        prompt = build_prompt('meu pedido {"id": 1}')
        self.assertIn('{"id": 1}', prompt)


class ModelFallbackAdapterTests(unittest.TestCase):
    def test_valid_output(self):
        provider = RecordingProvider(json.dumps(VALID_BILLING))
        result = asyncio.run(ModelFallbackAdapter(provider).classify("Qual o valor do serviço?"))
        self.assertEqual(result.intent, Intent.BILLING)
        self.assertEqual(result.confidence, 0.9)
        self.assertEqual(result.entities[0].value, "serviço")

    def test_sends_prompt_and_schema(self):
        provider = RecordingProvider(json.dumps(VALID_BILLING))
        asyncio.run(ModelFallbackAdapter(provider, timeout_seconds=3.0).classify("Qual o valor?"))
        call = provider.calls[0]
        self.assertIn("Qual o valor?", call["prompt"])
        schema = call["response_schema"]
        self.assertEqual(set(schema["properties"]), {"intent", "confidence", "entities", "should_reply", "reply_hint"})
        self.assertEqual(call["timeout_seconds"], 3.0)

    def test_fenced_json_accepted(self):
        provider = RecordingProvider("```json\n" + json.dumps(VALID_BILLING) + "\n```")
        result = asyncio.run(ModelFallbackAdapter(provider).classify("Qual o valor?"))
        self.assertEqual(result.intent, Intent.BILLING)

    def test_opt_out_not_enforced_here(self):
        payload = dict(VALID_BILLING, intent="OPT_OUT", should_reply=True, reply_hint="Tchau")
        result = asyncio.run(ModelFallbackAdapter(RecordingProvider(json.dumps(payload))).classify("x y z w"))
        self.assertEqual(result.intent, Intent.OPT_OUT)
        self.assertTrue(result.should_reply)

    def test_no_json_raises(self):
        with self.assertRaises(ModelUnavailable):
            asyncio.run(ModelFallbackAdapter(RecordingProvider("Desculpe, não sei.")).classify("texto"))

    def test_unknown_intent_raises(self):
        payload = dict(VALID_BILLING, intent="BUY_PIZZA")
        with self.assertRaises(ModelUnavailable):
            asyncio.run(ModelFallbackAdapter(RecordingProvider(json.dumps(payload))).classify("texto"))

    def test_confidence_out_of_range_raises(self):
        payload = dict(VALID_BILLING, confidence=1.5)
        with self.assertRaises(ModelUnavailable):
            asyncio.run(ModelFallbackAdapter(RecordingProvider(json.dumps(payload))).classify("texto"))

    def test_unknown_entity_type_raises(self):
        payload = dict(VALID_BILLING, entities=[{"type": "person", "value": "João"}])
        with self.assertRaises(ModelUnavailable):
            asyncio.run(ModelFallbackAdapter(RecordingProvider(json.dumps(payload))).classify("texto"))

    def test_long_reply_hint_raises(self):
        payload = dict(VALID_BILLING, reply_hint="x" * 161)
        with self.assertRaises(ModelUnavailable):
            asyncio.run(ModelFallbackAdapter(RecordingProvider(json.dumps(payload))).classify("texto"))

    def test_missing_field_raises(self):
        payload = {k: v for k, v in VALID_BILLING.items() if k != "should_reply"}
        with self.assertRaises(ModelUnavailable):
            asyncio.run(ModelFallbackAdapter(RecordingProvider(json.dumps(payload))).classify("texto"))

    def test_transport_error_raises_with_cause(self):
        exc = httpx.ConnectError("connection refused")
        with self.assertRaises(ModelUnavailable) as ctx:
            asyncio.run(ModelFallbackAdapter(FailingProvider(exc)).classify("texto"))
        self.assertIs(ctx.exception.__cause__, exc)

    def test_timeout_raises(self):
        with self.assertRaises(ModelUnavailable) as ctx:
            asyncio.run(ModelFallbackAdapter(SlowProvider(), timeout_seconds=0.05).classify("texto"))
        self.assertIn("timed out", ctx.exception.reason)

    def test_mock_provider_default_payload_is_valid(self):
        result = asyncio.run(ModelFallbackAdapter(MockProvider()).classify("texto"))
        self.assertEqual(result.intent, Intent.OTHER)


class ModelFallbackResolutionTests(unittest.TestCase):
    @patch.dict(
        os.environ,
        {"AI_CLASSIFY_PROVIDER": "mock", "AI_CLASSIFY_MODEL": "", "AI_ALLOWED_PROVIDERS": "mock"},
        clear=False,
    )
    def test_resolves_configured_provider(self):
        result = asyncio.run(classify_via_model("Qual o valor do serviço?"))
        self.assertEqual(result.intent, Intent.OTHER)

    @patch.dict(
        os.environ,
        {"AI_CLASSIFY_PROVIDER": "openai", "OPENAI_API_KEY": "", "AI_ALLOWED_PROVIDERS": "openai,mock"},
        clear=False,
    )
    def test_unconfigured_provider_raises_model_unavailable(self):
        with self.assertRaises(ModelUnavailable) as ctx:
            asyncio.run(classify_via_model("Qual o valor do serviço?"))
        self.assertIn("not configured", ctx.exception.reason)

    @patch.dict(
        os.environ,
        {"AI_CLASSIFY_PROVIDER": "claude", "AI_ALLOWED_PROVIDERS": "mock"},
        clear=False,
    )
    def test_disallowed_provider_raises_model_unavailable(self):
        with self.assertRaises(ModelUnavailable):
            asyncio.run(classify_via_model("Qual o valor do serviço?"))


if __name__ == "__main__":
    unittest.main()
