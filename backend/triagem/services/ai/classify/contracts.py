"""Classification contracts: ClassificationResult + schema for the model."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

MAX_REPLY_HINT_CHARS = 160


class ModelUnavailable(Exception):
    """The generative model could not produce a schema-conforming result."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class Intent(str, Enum):
    OPT_OUT = "OPT_OUT"
    GREETING = "GREETING"
    INFO_REQUEST = "INFO_REQUEST"
    SUPPORT_REQUEST = "SUPPORT_REQUEST"
    BILLING = "BILLING"
    SCHEDULING = "SCHEDULING"
    NEGATIVE_FEEDBACK = "NEGATIVE_FEEDBACK"
    SPAM = "SPAM"
    OTHER = "OTHER"


class EntityType(str, Enum):
    ACTION = "action"
    PRODUCT_OR_PLAN = "product_or_plan"
    PAYMENT_METHOD = "payment_method"
    DATE = "date"
    TIME = "time"
    ORDER_ID = "order_id"
    ERROR_SIGNAL = "error_signal"


ENTITIES_DESCRIPTION = """\
Idioma fixo é PT-BR

1. action:
  - quando houver uma ação explícita: "cancelar", "sair", "parar", "remover"
  - ex: { "type": "action", "value": "cancelar" }
2. product_or_plan:
  - quando mencionar plano/assinatura/produto: "plano premium", "mensal", "pro"
  - ex: { "type": "product_or_plan", "value": "plano premium" }
3. payment_method:
  - quando citar "pix", "boleto", "cartão"
  - ex: { "type": "payment_method", "value": "pix" }
4. date:
  - "amanhã", "hoje", "25/02", "sexta"
  - ex: { "type": "date", "value": "amanhã" }
5. time:
  - "14h", "18:30"
  - ex: { "type": "time", "value": "14h" }
6. order_id:
  - qualquer identificador: "pedido 1234", "#A98F"
  - ex: { "type": "order_id", "value": "1234" }
7. error_signal:
  - quando houver sinal de erro: "erro 500", "falha", "não funciona", "bug"
  - ex: { "type": "error_signal", "value": "não está funcionando" }
"""


class Entity(BaseModel):
    """A typed span of information extracted from the message."""

    model_config = ConfigDict(frozen=True)

    type: EntityType
    value: str


class ClassificationResult(BaseModel):
    """The single output of the classification pipeline."""

    model_config = ConfigDict(frozen=True, title="ClassificationResult")

    intent: Intent
    confidence: float = Field(ge=0.0, le=1.0)
    entities: tuple[Entity, ...] = Field(default_factory=tuple, description=ENTITIES_DESCRIPTION)
    should_reply: bool = Field(
        description="Se intent = OPT_OUT, então deve ser false. Caso contrário, deve ser true",
    )
    reply_hint: str = Field(
        max_length=MAX_REPLY_HINT_CHARS,
        description="Se intent = OPT_OUT, então deve ser vazio. Caso contrário, deve ser uma dica de resposta",
    )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict with exactly the five public fields."""
        return self.model_dump(mode="json")


def classification_json_schema() -> dict[str, Any]:
    """JSON schema handed to the generative model as its output contract."""
    return ClassificationResult.model_json_schema()
