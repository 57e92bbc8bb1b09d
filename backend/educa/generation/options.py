from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Type

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class ResourceType(str, Enum):
    COMPRENSION = "comprension"
    ESCRITURA = "escritura"
    EVALUACION = "evaluacion"
    GRAMATICA = "gramatica"
    ORAL = "oral"
    DRAG_AND_DROP = "drag_and_drop"
    ICE_BREAKERS = "ice_breakers"

    @classmethod
    def parse(cls, value: Any) -> Optional["ResourceType"]:
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


class ActivityKind(str, Enum):
    FORMAR_ORACION = "formar_oracion"
    COMPLETAR_ORACION = "completar_oracion"


class IceBreakerKind(str, Enum):
    ADIVINA_QUIEN_SOY = "adivina_quien_soy"
    DIBUJA_LO_QUE_DIGO = "dibuja_lo_que_digo"
    TRES_COSAS_SOBRE_MI = "tres_cosas_sobre_mi"


def _alias(*names: str) -> Any:
    return Field(default=None, validation_alias=AliasChoices(*names))


class ResourceOptions(BaseModel):
    # Options come straight from the client; unknown keys are kept, nothing is required
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: Any = _alias("title", "titulo")
    competencias: Any = None
    tema: Any = None

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # A null under one alias must not shadow a value under another
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class EvaluacionOptions(ResourceOptions):
    tipo_texto: Any = _alias("tipoTexto", "tipo_texto")
    longitud: Any = None
    num_literal: Any = _alias("numLiteral", "num_literal")


class ComprensionOptions(ResourceOptions):
    tipo_texto: Any = _alias("tipoTexto", "tipo_texto")
    longitud: Any = None
    num_literal: Any = _alias("numLiteral", "num_literal")
    num_inferencial: Any = _alias("numInferencial", "num_inferencial")
    num_critica: Any = _alias("numCritica", "num_critica")
    vocabulario: Any = None


class EscrituraOptions(ResourceOptions):
    tipo_texto: Any = _alias("tipoTexto", "tipo_texto")
    nivel_ayuda: Any = _alias("nivelAyuda", "nivel_ayuda")
    conectores: Any = None


class GramaticaOptions(ResourceOptions):
    aspecto: Any = None
    tipo_ejercicio: Any = _alias("tipoEjercicio", "tipo_ejercicio")
    num_items: Any = _alias("numItems", "num_items")
    contexto: Any = None


class OralOptions(ResourceOptions):
    formato: Any = None
    instrucciones: Any = None


class DragAndDropOptions(ResourceOptions):
    activity_kind: Any = _alias("activityKind", "tipoActividad", "activity_kind")
    tema_predefinido: Any = _alias("temaPredefinido", "tema_predefinido")
    tema_personalizado: Any = _alias("temaPersonalizado", "tema_personalizado")
    longitud_oracion: Any = _alias("longitudOracion", "longitud_oracion")
    num_actividades: Any = _alias("numActividades", "num_actividades")

    def resolved_theme(self) -> str:
        if self.tema_predefinido and self.tema_predefinido != CUSTOM_THEME:
            return str(self.tema_predefinido)
        if self.tema_predefinido == CUSTOM_THEME and self.tema_personalizado:
            return str(self.tema_personalizado)
        return str(self.tema or "cotidiano")

    def resolved_sentence_length(self) -> str:
        return str(self.longitud_oracion or "Normal (4-5 palabras)")


class IceBreakersOptions(ResourceOptions):
    tipo_ice_breaker: Any = _alias("tipoIceBreaker", "tipo_ice_breaker")
    numero_actividades: Any = _alias("numeroActividades", "numero_actividades")

    def resolved_theme(self) -> str:
        return str(self.tema or "general")

    def resolved_count(self) -> Any:
        return self.numero_actividades or 2


CUSTOM_THEME = "Otro (personalizado)"

OPTIONS_BY_TYPE: Dict[ResourceType, Type[ResourceOptions]] = {
    ResourceType.COMPRENSION: ComprensionOptions,
    ResourceType.ESCRITURA: EscrituraOptions,
    ResourceType.EVALUACION: EvaluacionOptions,
    ResourceType.GRAMATICA: GramaticaOptions,
    ResourceType.ORAL: OralOptions,
    ResourceType.DRAG_AND_DROP: DragAndDropOptions,
    ResourceType.ICE_BREAKERS: IceBreakersOptions,
}


def parse_options(resource_type: Optional[ResourceType], options: Optional[Dict[str, Any]]) -> ResourceOptions:
    model = OPTIONS_BY_TYPE.get(resource_type, ResourceOptions) if resource_type else ResourceOptions
    return model.model_validate(dict(options or {}))


@dataclass(frozen=True)
class GenerationRequest:
    resource_type: str
    options: Dict[str, Any] = field(default_factory=dict)
