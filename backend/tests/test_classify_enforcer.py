"""Tests for the reply-contract enforcer."""

import unittest

from triagem.services.ai.classify.contracts import ClassificationResult, Entity, EntityType, Intent
from triagem.services.ai.classify.enforcer import enforce


def _result(intent, *, should_reply=True, reply_hint="dica", entities=None, confidence=0.7):
    return ClassificationResult(
        intent=intent,
        confidence=confidence,
        entities=entities or [],
        should_reply=should_reply,
        reply_hint=reply_hint,
    )


class EnforceTests(unittest.TestCase):
    def test_opt_out_forced_silent(self):
        r = enforce(_result(Intent.OPT_OUT, should_reply=True, reply_hint="Confirmar cancelamento"))
        self.assertFalse(r.should_reply)
        self.assertEqual(r.reply_hint, "")

    def test_opt_out_keeps_entities_and_confidence(self):
        entities = [Entity(type=EntityType.ACTION, value="cancelar")]
        r = enforce(_result(Intent.OPT_OUT, entities=entities, confidence=0.93))
        self.assertEqual(r.entities, tuple(entities))
        self.assertEqual(r.confidence, 0.93)

    def test_info_request_has_no_hint(self):
        r = enforce(_result(Intent.INFO_REQUEST, reply_hint="Informar o horário"))
        self.assertEqual(r.reply_hint, "")
        self.assertTrue(r.should_reply)

    def test_non_opt_out_is_replied(self):
        r = enforce(_result(Intent.BILLING, should_reply=False, reply_hint=""))
        self.assertTrue(r.should_reply)

    def test_other_fields_pass_through(self):
        original = _result(
            Intent.SCHEDULING,
            reply_hint="Confirmar o horário",
            entities=[Entity(type=EntityType.DATE, value="amanhã"), Entity(type=EntityType.TIME, value="14h")],
        )
        self.assertEqual(enforce(original), original)

    def test_entities_cannot_be_mutated_in_place(self):
        r = enforce(_result(Intent.BILLING, entities=[Entity(type=EntityType.PAYMENT_METHOD, value="pix")]))
        self.assertIsInstance(r.entities, tuple)
        with self.assertRaises(AttributeError):
            r.entities.append(Entity(type=EntityType.DATE, value="hoje"))

    def test_unchanged_result_is_same_instance(self):
        original = _result(Intent.GREETING)
        self.assertIs(enforce(original), original)

    def test_input_not_mutated(self):
        original = _result(Intent.OPT_OUT, should_reply=True, reply_hint="x")
        enforce(original)
        self.assertTrue(original.should_reply)
        self.assertEqual(original.reply_hint, "x")

    def test_idempotent_for_every_intent_and_flag_combination(self):
        for intent in Intent:
            for should_reply in (True, False):
                for hint in ("", "Dica qualquer"):
                    with self.subTest(intent=intent, should_reply=should_reply, hint=hint):
                        once = enforce(_result(intent, should_reply=should_reply, reply_hint=hint))
                        self.assertEqual(enforce(once), once)

    def test_invariant_holds_after_enforce(self):
        for intent in Intent:
            for should_reply in (True, False):
                for hint in ("", "Dica qualquer"):
                    with self.subTest(intent=intent, should_reply=should_reply, hint=hint):
                        r = enforce(_result(intent, should_reply=should_reply, reply_hint=hint))
                        silent = (not r.should_reply) and r.reply_hint == ""
                        self.assertEqual(r.intent is Intent.OPT_OUT, silent)


if __name__ == "__main__":
    unittest.main()
