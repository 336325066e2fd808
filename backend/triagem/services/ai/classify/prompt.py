"""Fixed PT-BR prompt for the model fallback."""

from __future__ import annotations

CLASSIFY_MESSAGE_PROMPT = """\
Classifique a mensagem do usuário e retorne a intenção, confiança, entidades, \
se deve responder e uma dica de resposta.

Mensagem: \"\"\"{message}\"\"\"

Intent:
- OPT_OUT — usuário quer parar ("sair", "cancelar", "parar mensagens")
- GREETING — cumprimento ("oi", "bom dia")
- INFO_REQUEST — pergunta pedindo informação ("qual horário?", "como funciona?")
- SUPPORT_REQUEST — problema/bug ("não funciona", "erro", "não consigo")
- BILLING — preço/assinatura/pagamento ("valor", "plano", "pix", "boleto")
- SCHEDULING — marcar/agenda ("agendar", "horário", "amanhã")
- NEGATIVE_FEEDBACK — reclamação ("péssimo", "ruim", "não gostei")
- SPAM — link suspeito, divulgação, golpe, conteúdo irrelevante
- OTHER — qualquer coisa fora disso

Entity types (idioma PT-BR):
- action — ação explícita: "cancelar", "sair", "parar", "remover"
- product_or_plan — plano/assinatura/produto: "plano premium", "mensal", "pro"
- payment_method — "pix", "boleto", "cartão"
- date — "amanhã", "hoje", "25/02", "sexta"
- time — "14h", "18:30"
- order_id — qualquer identificador: "pedido 1234" -> "1234", "#A98F"
- error_signal — sinal de erro: "erro 500", "falha", "não funciona", "bug"

Regras determinísticas:
- Retorne APENAS os campos do schema
- Use somente entity types permitidos
- Não invente entities; se não houver, retorne []
- confidence entre 0 e 1
- Se intent = OPT_OUT:
  1. should_reply = false
  2. reply_hint = ""
- Caso contrário, should_reply = true
- reply_hint deve ser uma dica curta (até 160 caracteres), não a resposta em si
- Não use exemplos para reply_hint, seja direto
"""


def build_prompt(message: str) -> str:
    """Embed the normalized *message* in the classification prompt."""
    return CLASSIFY_MESSAGE_PROMPT.format(message=message)
