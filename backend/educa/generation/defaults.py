"""Placeholder resources returned when the model cannot produce usable content."""

from typing import Any, Callable, Dict, Optional

from .options import (
    ActivityKind,
    ComprensionOptions,
    DragAndDropOptions,
    IceBreakerKind,
    IceBreakersOptions,
    ResourceOptions,
    ResourceType,
    parse_options,
)


def _comprension(titulo: str, opts: ComprensionOptions) -> Dict[str, Any]:
    resource: Dict[str, Any] = {
        "titulo": titulo,
        "texto": (
            "Este es un texto de ejemplo para comprensión lectora. "
            "Los estudiantes deben leer atentamente y responder las preguntas."
        ),
        "preguntas": [
            {"tipo": "literal", "pregunta": "¿De qué trata el texto?", "respuesta": "Respuesta de ejemplo"},
        ],
    }
    if opts.vocabulario:
        resource["vocabulario"] = [{"palabra": "ejemplo", "definicion": "Modelo o muestra de algo"}]
    return resource


def _escritura(titulo: str, opts: ResourceOptions) -> Dict[str, Any]:
    return {
        "titulo": titulo,
        "descripcion": "Actividad de escritura para estudiantes de 2° grado",
        "instrucciones": "Escribe un texto siguiendo las indicaciones del docente",
        "estructuraPropuesta": "Introducción, desarrollo y conclusión",
        "conectores": ["Primero", "Luego", "Finalmente"],
        "listaVerificacion": ["Revisar ortografía", "Verificar coherencia"],
    }


def _evaluacion(titulo: str, opts: ResourceOptions) -> Dict[str, Any]:
    return {
        "titulo": titulo,
        "texto": (
            "Los animales son seres vivos que habitan en diferentes lugares. Algunos viven en el agua, "
            "otros en la tierra y algunos pueden volar por el cielo."
        ),
        "preguntas": [
            {
                "pregunta": "¿Dónde viven los animales?",
                "opciones": ["Solo en el agua", "En diferentes lugares", "Solo en la tierra", "Solo en el cielo"],
                "respuesta": "En diferentes lugares",
            },
        ],
    }


def _gramatica(titulo: str, opts: ResourceOptions) -> Dict[str, Any]:
    return {
        "titulo": titulo,
        "instrucciones": "Completa los ejercicios siguiendo el ejemplo",
        "ejemplo": "La niña come manzana",
        "items": [
            {"consigna": "Escribe una oración con la palabra 'casa'", "respuesta": "Mi casa es bonita"},
        ],
    }


def _oral(titulo: str, opts: ResourceOptions) -> Dict[str, Any]:
    return {
        "titulo": titulo,
        "descripcion": "Actividad de comunicación oral",
        "instruccionesDocente": "Guíe a los estudiantes en la actividad",
        "guionEstudiante": "Estructura básica para la presentación",
        "preguntasOrientadoras": ["¿Qué quieres contar?", "¿Cómo te sientes?"],
        "criteriosEvaluacion": ["Habla claro", "Usa palabras adecuadas"],
    }


def _drag_and_drop(titulo: str, opts: DragAndDropOptions) -> Dict[str, Any]:
    if opts.activity_kind == ActivityKind.COMPLETAR_ORACION.value:
        activity = {
            "tipo": ActivityKind.COMPLETAR_ORACION.value,
            "enunciado": "Los peces viven en el _____.",
            "opciones": ["agua", "árbol", "cielo", "libro"],
            "respuesta": ["agua"],
        }
    else:
        activity = {
            "tipo": ActivityKind.FORMAR_ORACION.value,
            "enunciado": "Arrastra las palabras para formar la oración correcta.",
            "opciones": ["rápido", "perro", "El", "corre"],
            "respuesta": ["El", "perro", "corre", "rápido"],
        }
    return {"titulo": titulo, "actividades": [activity]}


def _guess_who() -> Dict[str, Any]:
    return {
        "nombre": "Adivina el animal",
        "instrucciones": "El docente lee las pistas una por una. Los estudiantes levantan la mano para adivinar.",
        "desarrollo": (
            "1. Presentar la actividad, 2. Leer primera pista, 3. Esperar respuestas, "
            "4. Continuar con más pistas si es necesario"
        ),
        "participantes": "Toda la clase",
        "contenidoEspecifico": {
            "tema": "animales",
            "pistas": [
                {"orden": 1, "pista": "Tengo orejas muy largas y las muevo mucho"},
                {"orden": 2, "pista": "Me gusta comer zanahorias y lechuga"},
                {"orden": 3, "pista": "Salto muy alto con mis patas traseras fuertes"},
                {"orden": 4, "pista": "Soy pequeño, suave y vivo en una conejera"},
            ],
            "respuesta": "conejo",
            "pistasFaciles": ["Hago sonidos como 'ñac ñac' cuando como"],
            "extension": "Los estudiantes pueden imitar cómo salta el animal",
        },
    }


def _draw_what_i_say() -> Dict[str, Any]:
    return {
        "nombre": "Dibuja la escena del parque",
        "instrucciones": "Lee la descripción pausadamente. Los estudiantes dibujan mientras escuchan.",
        "desarrollo": "1. Repartir materiales, 2. Leer la descripción por partes, 3. Comparar los dibujos",
        "participantes": "Individual",
        "materiales": ["Papel", "Lápices de colores"],
        "contenidoEspecifico": {
            "descripcion": (
                "Dibuja un árbol grande en el centro. Arriba del árbol hay un sol amarillo. "
                "Al lado del árbol hay una casa pequeña con una puerta roja."
            ),
            "elementosClave": ["árbol", "sol", "casa", "puerta roja"],
            "vocabularioObjetivo": ["arriba", "al lado", "grande", "pequeña"],
            "criteriosEvaluacion": ["Incluye todos los elementos", "Posiciones correctas"],
            "modalidad": "oral",
            "extension": "Los estudiantes explican su dibujo",
        },
    }


def _three_things() -> Dict[str, Any]:
    return {
        "nombre": "Comparto mis gustos",
        "instrucciones": "Cada estudiante completa las tres frases. Comenzar con voluntarios.",
        "desarrollo": "1. Mostrar las frases, 2. Dar un ejemplo, 3. Compartir en ronda",
        "participantes": "Individual con grupo",
        "contenidoEspecifico": {
            "frases": [
                {"template": "Me gusta...", "ejemplos": ["jugar fútbol", "los helados", "dibujar"]},
                {"template": "No me gusta...", "ejemplos": ["la lluvia", "dormir temprano", "el ruido"]},
                {"template": "Mi animal favorito es...", "ejemplos": ["el perro", "el gato", "el delfín"]},
            ],
            "apoyoVisual": "Lista de opciones con dibujos para estudiantes tímidos",
            "extension": "Encontrar compañeros con gustos similares",
        },
    }


_ICE_BREAKER_DEFAULTS: Dict[IceBreakerKind, Callable[[], Dict[str, Any]]] = {
    IceBreakerKind.ADIVINA_QUIEN_SOY: _guess_who,
    IceBreakerKind.DIBUJA_LO_QUE_DIGO: _draw_what_i_say,
    IceBreakerKind.TRES_COSAS_SOBRE_MI: _three_things,
}


def _ice_breakers(titulo: str, opts: IceBreakersOptions) -> Dict[str, Any]:
    try:
        kind = IceBreakerKind(opts.tipo_ice_breaker)
    except (ValueError, TypeError):
        kind = IceBreakerKind.ADIVINA_QUIEN_SOY
    return {
        "titulo": titulo,
        "descripcion": "Actividades de rompehielos para iniciar clases de forma dinámica",
        "actividades": [_ICE_BREAKER_DEFAULTS[kind]()],
        "objetivos": ["Comprensión oral", "Expresión oral", "Participación activa"],
        "variaciones": ["Usar imágenes como apoyo", "Los estudiantes crean su propia versión"],
    }


def _unknown(titulo: str, opts: ResourceOptions) -> Dict[str, Any]:
    return {
        "titulo": titulo,
        "contenido": "Recurso generado por defecto debido a un error temporal. Por favor, intente nuevamente.",
    }


_DEFAULTS: Dict[ResourceType, Callable[[str, Any], Dict[str, Any]]] = {
    ResourceType.COMPRENSION: _comprension,
    ResourceType.ESCRITURA: _escritura,
    ResourceType.EVALUACION: _evaluacion,
    ResourceType.GRAMATICA: _gramatica,
    ResourceType.ORAL: _oral,
    ResourceType.DRAG_AND_DROP: _drag_and_drop,
    ResourceType.ICE_BREAKERS: _ice_breakers,
}


def get_default_resource(resource_type: Any, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    rtype = ResourceType.parse(resource_type)
    opts = parse_options(rtype, options)
    type_label = rtype.value if rtype else str(resource_type)
    titulo = str(opts.title) if opts.title else f"Recurso de {type_label}"
    factory = _DEFAULTS.get(rtype, _unknown) if rtype else _unknown
    return factory(titulo, opts)
