"""
Prompt construction for every resource type.

build_prompt() is pure and never raises: absent options render as blank text
and unknown types or sub-kinds get a generic instruction, leaving it to the
generator to fall back to default content if the model cannot cope.

Layout of every prompt:
  1. title anchor (only when a title was given)
  2. competencies: caller-supplied or the default three areas
  3. type-specific block ending in the literal JSON schema to return
  4. closing curriculum reminder
"""

from typing import Any, Callable, Dict, Optional

from .options import (
    ActivityKind,
    ComprensionOptions,
    DragAndDropOptions,
    EscrituraOptions,
    EvaluacionOptions,
    GramaticaOptions,
    IceBreakerKind,
    IceBreakersOptions,
    OralOptions,
    ResourceOptions,
    ResourceType,
    parse_options,
)

SYSTEM_PROMPT = (
    "Eres un docente experto en comunicación para estudiantes de 2º grado que crea "
    "materiales didácticos alineados con el Currículo Nacional peruano."
)

DEFAULT_COMPETENCIAS = (
    "- **Lectura**: Interpretar, inferir y evaluar textos simples (con ilustraciones y vocabulario conocido).\n"
    "- **Escritura**: Organizar y desarrollar ideas de forma coherente, usando vocabulario adecuado, "
    "conectores básicos y normas ortográficas.\n"
    "- **Comunicación Oral**: Expresar ideas de forma clara y estructurada, utilizando recursos verbales "
    "y no verbales y conectores simples."
)

CURRICULUM_REMINDER = (
    "Recuerda alinear el recurso con las competencias del Currículo Nacional de Educación Básica "
    "del Perú para 2º grado en el área de Comunicación."
)

JSON_ONLY = "Responde ÚNICAMENTE con un objeto JSON que siga esta estructura exacta, sin explicaciones, sin comentarios:"

AGE_NOTE = "niños de 7-8 años"


def _v(value: Any) -> str:
    return "" if value is None else str(value)


def _header(opts: ResourceOptions) -> str:
    parts = []
    if opts.title:
        parts.append(
            f'El título de este recurso es "{_v(opts.title)}". Asegúrate de que el contenido '
            "generado se relacione directamente con este título."
        )
    if opts.competencias:
        parts.append(f"Utiliza las siguientes competencias como guía: {_v(opts.competencias)}")
    else:
        parts.append(f"Utiliza las siguientes competencias como guía:\n{DEFAULT_COMPETENCIAS}")
    return "\n\n".join(parts) + "\n\n"


# ─── Per-type blocks ───────────────────────────────────────────────────────────

def _evaluacion(opts: EvaluacionOptions) -> str:
    return f"""Genera un examen de opción múltiple de comprensión lectora para estudiantes de 2º grado con las siguientes características:
- Título: {_v(opts.title)}
- Tipo de texto: {_v(opts.tipo_texto)}
- Tema: {_v(opts.tema)}
- Longitud: {_v(opts.longitud)} palabras
- Preguntas literales: {_v(opts.num_literal)}

Cada pregunta debe tener 4 opciones, indicando cuál es la correcta. La respuesta debe copiar exactamente el texto de una de las opciones. El texto y las preguntas deben ser apropiados para {AGE_NOTE}.

{JSON_ONLY}

{{
  "titulo": "Título del examen",
  "texto": "Contenido del texto completo",
  "preguntas": [
    {{ "pregunta": "Pregunta 1", "opciones": ["Opción A", "Opción B", "Opción C", "Opción D"], "respuesta": "Opción A" }}
  ]
}}

Todas las preguntas deben ser de tipo literal."""


def _comprension(opts: ComprensionOptions) -> str:
    vocab_line = "\n- Incluir sección de vocabulario con 5 palabras clave y sus definiciones" if opts.vocabulario else ""
    return f"""Genera una ficha de comprensión lectora para estudiantes de 2º grado con las siguientes características:
- Tipo de texto: {_v(opts.tipo_texto)}
- Tema: {_v(opts.tema)}
- Longitud: {_v(opts.longitud)} palabras
- Preguntas literales: {_v(opts.num_literal)}
- Preguntas inferenciales: {_v(opts.num_inferencial)}
- Preguntas críticas: {_v(opts.num_critica)}{vocab_line}

El texto debe ser apropiado para {AGE_NOTE}, con vocabulario sencillo y oraciones cortas.

{JSON_ONLY}

{{
  "titulo": "Título de la ficha",
  "texto": "Contenido del texto completo",
  "preguntas": [
    {{"tipo": "literal", "pregunta": "Pregunta 1", "respuesta": "Respuesta 1"}},
    {{"tipo": "inferencial", "pregunta": "Pregunta 2", "respuesta": "Respuesta 2"}},
    {{"tipo": "critica", "pregunta": "Pregunta 3", "respuesta": "Respuesta 3"}}
  ],
  "vocabulario": [
    {{"palabra": "Palabra 1", "definicion": "Definición 1"}},
    {{"palabra": "Palabra 2", "definicion": "Definición 2"}}
  ]
}}"""


def _escritura(opts: EscrituraOptions) -> str:
    connectors_line = "\n- Incluir banco de conectores apropiados" if opts.conectores else ""
    return f"""Genera una actividad de producción escrita para estudiantes de 2º grado con las siguientes características:
- Tipo de texto: {_v(opts.tipo_texto)}
- Tema: {_v(opts.tema)}
- Nivel de ayuda: {_v(opts.nivel_ayuda)}{connectors_line}

La actividad debe incluir instrucciones claras y sencillas apropiadas para {AGE_NOTE}.

{JSON_ONLY}

{{
  "titulo": "Título de la actividad",
  "descripcion": "Breve descripción de la actividad",
  "instrucciones": "Instrucciones paso a paso",
  "estructuraPropuesta": "Estructura sugerida para el texto",
  "conectores": ["Conector 1", "Conector 2", "Conector 3"],
  "listaVerificacion": ["Punto 1", "Punto 2", "Punto 3"]
}}"""


def _gramatica(opts: GramaticaOptions) -> str:
    return f"""Genera un ejercicio de gramática y ortografía para estudiantes de 2º grado con las siguientes características:
- Aspecto a trabajar: {_v(opts.aspecto)}
- Tipo de ejercicio: {_v(opts.tipo_ejercicio)}
- Número de ítems: {_v(opts.num_items)}
- Contexto: {_v(opts.contexto)}

El ejercicio debe incluir instrucciones claras y ejemplos sencillos apropiados para {AGE_NOTE}.

{JSON_ONLY}

{{
  "titulo": "Título del ejercicio",
  "instrucciones": "Instrucciones claras y sencillas",
  "ejemplo": "Ejemplo resuelto para guiar a los estudiantes",
  "items": [
    {{"consigna": "Ítem 1", "respuesta": "Respuesta 1"}},
    {{"consigna": "Ítem 2", "respuesta": "Respuesta 2"}}
  ]
}}"""


def _oral(opts: OralOptions) -> str:
    return f"""Genera un guion para actividad de comunicación oral para estudiantes de 2º grado con las siguientes características:
- Formato: {_v(opts.formato)}
- Tema: {_v(opts.tema)}
- Instrucciones específicas: {_v(opts.instrucciones)}

La actividad debe ser apropiada para {AGE_NOTE}, con vocabulario sencillo y estructuras simples.

{JSON_ONLY}

{{
  "titulo": "Título de la actividad",
  "descripcion": "Breve descripción de la actividad",
  "instruccionesDocente": "Guía para el docente",
  "guionEstudiante": "Modelo o estructura para los estudiantes",
  "preguntasOrientadoras": ["Pregunta 1", "Pregunta 2", "Pregunta 3"],
  "criteriosEvaluacion": ["Criterio 1", "Criterio 2", "Criterio 3"]
}}"""


# drag_and_drop sub-kinds

def _formar_oracion(opts: DragAndDropOptions, theme: str, length: str) -> str:
    return f"""El título de este recurso es "Juegos interactivos - Formar oraciones".

Genera exactamente {_v(opts.num_actividades)} actividades de tipo "formar_oracion" para estudiantes de 2º grado de primaria sobre el tema "{theme}".

PARÁMETROS DE CONFIGURACIÓN:
- Tema: {theme}
- Longitud de oraciones: {length}

CARACTERÍSTICAS PARA ORACIONES NATURALES:
- TODAS las actividades deben ser tipo "formar_oracion"
- Crea oraciones con flujo natural, como las que un niño diría al hablar
- Respeta la longitud especificada: {length}
- La primera palabra DEBE empezar con MAYÚSCULA
- Presenta las palabras mezcladas aleatoriamente en "opciones"
- "respuesta" contiene las mismas palabras en el orden correcto
- Usa verbos de acción, descriptores naturales y contextos familiares
- Cada oración debe tener sentido completo
- Vocabulario apropiado para 2º grado ({AGE_NOTE})

EJEMPLOS:
- "El perro corre alegre" → ["alegre", "perro", "corre", "El"]
- "Mi hermana canta hermoso" → ["canta", "hermana", "Mi", "hermoso"]
- "Los niños juegan juntos" → ["juntos", "niños", "juegan", "Los"]

EVITAR oraciones artificiales o incompletas como "El niño tiene lápiz" o "Los estudiantes en escuela".

Estructura JSON requerida:

{{
  "titulo": "Juegos interactivos - Formar oraciones",
  "actividades": [
    {{
      "tipo": "formar_oracion",
      "enunciado": "Arrastra las palabras para formar la oración correcta sobre {theme}.",
      "opciones": ["palabra1", "palabra2", "palabra3", "palabra4"],
      "respuesta": ["Palabra1", "palabra2", "palabra3", "palabra4"]
    }}
  ]
}}"""


def _completar_oracion(opts: DragAndDropOptions, theme: str, length: str) -> str:
    return f"""El título de este recurso es "Juegos interactivos - Completar oraciones".

Genera exactamente {_v(opts.num_actividades)} actividades de tipo "completar_oracion" para estudiantes de 2º grado de primaria sobre el tema "{theme}".

PARÁMETROS DE CONFIGURACIÓN:
- Tema: {theme}
- Longitud de oraciones: {length}

CARACTERÍSTICAS OBLIGATORIAS:
- TODAS las actividades deben ser tipo "completar_oracion"
- El campo "enunciado" DEBE contener EXACTAMENTE 5 guiones bajos seguidos: _____
- NUNCA incluir la respuesta completa en el enunciado
- La oración debe sonar como algo que un niño diría naturalmente
- Primera letra MAYÚSCULA y punto final
- Exactamente 4 opciones: 1 correcta y 3 claramente incorrectas
- Las opciones incorrectas NO deben tener sentido en el contexto
- "respuesta" es una lista con la única palabra correcta
- Vocabulario familiar y cotidiano apropiado para 2º grado

EJEMPLOS CORRECTOS:
- "Mi mamá cocina muy _____." Opciones: ["rico", "mesa", "libro", "zapato"] → Respuesta: ["rico"]
- "Los peces viven en el _____." Opciones: ["agua", "árbol", "cielo", "libro"] → Respuesta: ["agua"]
- "Los niños escriben con el _____." Opciones: ["lápiz", "perro", "comida", "árbol"] → Respuesta: ["lápiz"]

EVITAR:
- Enunciados sin los 5 guiones bajos
- Varias opciones correctas, por ejemplo "Mi _____ me quiere" con ["mamá", "papá", "hermana"]

Estructura JSON requerida:

{{
  "titulo": "Juegos interactivos - Completar oraciones",
  "actividades": [
    {{
      "tipo": "completar_oracion",
      "enunciado": "Mi mamá cocina muy _____.",
      "opciones": ["rico", "mesa", "libro", "zapato"],
      "respuesta": ["rico"]
    }}
  ]
}}"""


_DRAG_AND_DROP_KINDS: Dict[ActivityKind, Callable[[DragAndDropOptions, str, str], str]] = {
    ActivityKind.FORMAR_ORACION: _formar_oracion,
    ActivityKind.COMPLETAR_ORACION: _completar_oracion,
}


def _drag_and_drop(opts: DragAndDropOptions) -> str:
    theme = opts.resolved_theme()
    length = opts.resolved_sentence_length()
    kind = _enum_or_none(ActivityKind, opts.activity_kind)
    if kind is None:
        body = 'Error: Tipo de actividad no válido. Debe ser "formar_oracion" o "completar_oracion".'
    else:
        body = _DRAG_AND_DROP_KINDS[kind](opts, theme, length)
    return body + f"""

RECUERDA:
- Generar exactamente {_v(opts.num_actividades)} actividades
- Todas deben ser del tipo "{_v(opts.activity_kind)}"
- Tema: "{theme}"
- Vocabulario apropiado para 2º grado
- Alineado con el Currículo Nacional peruano de Comunicación"""


# ice_breakers sub-kinds

_THEME_GUIDANCE = {
    "animales": """Para el tema ANIMALES, usa ÚNICAMENTE animales simples y comunes que los niños de 2º grado conocen bien:
- Animales domésticos: perro, gato, conejo, pez, pájaro, gallina, vaca, caballo, cerdo, oveja
- Animales salvajes conocidos: león, elefante, jirafa, mono, oso, tigre, hipopótamo, cocodrilo
- Evitar animales exóticos o poco conocidos
- Usar características físicas y comportamientos evidentes""",
    "alimentos": """Para el tema ALIMENTOS, usa comidas comunes y familiares para niños:
- Frutas: manzana, plátano, naranja, uvas, fresa, piña
- Verduras: zanahoria, tomate, lechuga, papa, cebolla
- Otros: pan, leche, huevo, queso, arroz, pasta
- Evitar alimentos poco comunes o regionales""",
}


def _adivina_quien_soy(theme: str) -> str:
    guidance = _THEME_GUIDANCE.get(theme, "")
    return f"""TIPO: "Adivina quién soy"
OBJETIVOS: Comprensión oral, inferencia, vocabulario

SELECCIÓN DE ELEMENTOS:
{guidance}

Para cada actividad genera:
- 3-4 pistas progresivas (de más difícil a más fácil)
- Pistas sobre características físicas obvias, sonidos, hábitat y comportamientos
- Respuesta clara usando el nombre común
- Pistas adicionales para estudiantes que necesiten más ayuda
- Vocabulario adecuado para la edad (sin términos técnicos)

ESTRUCTURA JSON REQUERIDA:
{{
  "titulo": "Ice Breakers - Adivina quién soy",
  "descripcion": "Actividades de adivinanzas con pistas para desarrollar comprensión oral e inferencia",
  "actividades": [
    {{
      "nombre": "Adivina el [animal/objeto/personaje]",
      "instrucciones": "El docente lee las pistas una por una. Los estudiantes levantan la mano para adivinar.",
      "desarrollo": "Pasos detallados de la actividad",
      "participantes": "Toda la clase",
      "contenidoEspecifico": {{
        "tema": "{theme}",
        "pistas": [
          {{"orden": 1, "pista": "Primera pista (más difícil)"}},
          {{"orden": 2, "pista": "Segunda pista (intermedia)"}},
          {{"orden": 3, "pista": "Tercera pista (más fácil)"}}
        ],
        "respuesta": "respuesta correcta",
        "pistasFaciles": ["pista adicional si necesitan ayuda"],
        "extension": "Actividad adicional relacionada"
      }}
    }}
  ],
  "objetivos": ["Comprensión oral", "Inferencia", "Vocabulario temático"],
  "variaciones": ["Variación 1", "Variación 2"]
}}"""


def _dibuja_lo_que_digo(theme: str) -> str:
    return """TIPO: "Dibuja lo que digo"
OBJETIVOS: Comprensión auditiva, atención, vocabulario espacial

CONTENIDO APROPIADO:
- Descripciones simples y claras que los niños puedan dibujar fácilmente
- Elementos familiares: casa, árbol, sol, nube, flores, personas, animales domésticos
- Vocabulario espacial básico: arriba, abajo, al lado, dentro, fuera, grande, pequeño
- Nada que requiera habilidades artísticas avanzadas
- Descripciones paso a paso que construyen la imagen gradualmente

Para cada actividad genera:
- Descripción clara y detallada para dibujar
- Elementos clave que deben aparecer en el dibujo (máximo 5-6)
- Vocabulario objetivo (preposiciones, adjetivos descriptivos básicos)
- Criterios simples de evaluación

ESTRUCTURA JSON REQUERIDA:
{
  "titulo": "Ice Breakers - Dibuja lo que digo",
  "descripcion": "Actividades de dibujo dirigido para desarrollar comprensión auditiva y vocabulario",
  "actividades": [
    {
      "nombre": "Dibuja la escena de [tema]",
      "instrucciones": "Lee la descripción pausadamente. Los estudiantes dibujan mientras escuchan.",
      "desarrollo": "Pasos detallados de la actividad",
      "participantes": "Individual",
      "materiales": ["Papel", "Lápices de colores"],
      "contenidoEspecifico": {
        "descripcion": "Descripción completa para dibujar",
        "elementosClave": ["elemento1", "elemento2", "elemento3"],
        "vocabularioObjetivo": ["palabra1", "palabra2", "palabra3"],
        "criteriosEvaluacion": ["Incluye todos los elementos", "Posiciones correctas"],
        "modalidad": "oral",
        "extension": "Los estudiantes explican su dibujo"
      }
    }
  ],
  "objetivos": ["Comprensión auditiva", "Atención sostenida", "Vocabulario espacial"],
  "variaciones": ["Trabajar en parejas", "Dibujo colaborativo"]
}"""


def _tres_cosas_sobre_mi(theme: str) -> str:
    return """TIPO: "Tres cosas sobre mí"
OBJETIVOS: Expresión oral, autoconocimiento, escucha activa

PLANTILLAS APROPIADAS:
Las plantillas de frases deben ser:
- Simples y fáciles de completar
- Apropiadas para la edad (gustos, preferencias, familia, juegos)
- Positivas y nada íntimas, para que todos respondan cómodamente

Ejemplos de buenas plantillas:
- "Me gusta..." (comida, color, juego, animal)
- "Mi favorito es..." (juguete, cuento, deporte)
- "Cuando tengo tiempo libre me gusta..."

Para cada actividad genera:
- Plantillas de frases apropiadas para la edad
- Ejemplos diversos para cada plantilla, sin repetir
- Apoyo visual para estudiantes tímidos
- Estrategias de participación gradual

ESTRUCTURA JSON REQUERIDA:
{
  "titulo": "Ice Breakers - Tres cosas sobre mí",
  "descripcion": "Actividades de presentación personal para fomentar expresión oral y autoconocimiento",
  "actividades": [
    {
      "nombre": "Comparto mis gustos",
      "instrucciones": "Cada estudiante completa las tres frases. Comenzar con voluntarios.",
      "desarrollo": "Pasos detallados de la actividad",
      "participantes": "Individual con grupo",
      "contenidoEspecifico": {
        "frases": [
          {"template": "Me gusta...", "ejemplos": ["ejemplo1", "ejemplo2", "ejemplo3"]},
          {"template": "No me gusta...", "ejemplos": ["ejemplo1", "ejemplo2", "ejemplo3"]},
          {"template": "Mi [algo] favorito es...", "ejemplos": ["ejemplo1", "ejemplo2", "ejemplo3"]}
        ],
        "apoyoVisual": "Lista de opciones con dibujos para estudiantes tímidos",
        "extension": "Encontrar compañeros con gustos similares"
      }
    }
  ],
  "objetivos": ["Expresión oral", "Autoconocimiento", "Escucha activa"],
  "variaciones": ["Compartir en parejas primero", "Usar tarjetas con imágenes"]
}"""


_ICE_BREAKER_KINDS: Dict[IceBreakerKind, Callable[[str], str]] = {
    IceBreakerKind.ADIVINA_QUIEN_SOY: _adivina_quien_soy,
    IceBreakerKind.DIBUJA_LO_QUE_DIGO: _dibuja_lo_que_digo,
    IceBreakerKind.TRES_COSAS_SOBRE_MI: _tres_cosas_sobre_mi,
}


def _ice_breakers(opts: IceBreakersOptions) -> str:
    theme = opts.resolved_theme()
    count = _v(opts.resolved_count())
    raw_kind = _v(opts.tipo_ice_breaker)
    kind = _enum_or_none(IceBreakerKind, opts.tipo_ice_breaker)
    theme_line = f"\n- Tema: {theme}" if kind is IceBreakerKind.ADIVINA_QUIEN_SOY else ""
    intro = f"""Genera exactamente {count} actividades de ice breakers (rompehielos) para estudiantes de 2º grado con las siguientes características:

PARÁMETROS:
- Tipo de ice breaker: {raw_kind}{theme_line}

CARACTERÍSTICAS GENERALES:
- Apropiadas para {AGE_NOTE}
- Fomentan la participación y desinhibición
- Usan vocabulario sencillo y comprensible
- Incluyen instrucciones claras para el docente
- Promueven un ambiente positivo y acogedor
- Alineadas con el desarrollo de competencias comunicativas

"""
    if kind is None:
        body = (
            'Error: Tipo de ice breaker no válido. Debe ser uno de: "adivina_quien_soy", '
            '"dibuja_lo_que_digo", "tres_cosas_sobre_mi".'
        )
    else:
        body = _ICE_BREAKER_KINDS[kind](theme)
    return intro + body + f"""

IMPORTANTE:
- Todas las actividades deben ser del tipo "{raw_kind}"
- Generar exactamente {count} actividades
- Tema: "{theme}"
- Vocabulario y situaciones apropiados para 2º grado ({AGE_NOTE})
- Contenido natural, lógico y familiar para los niños
- Evitar elementos complicados, exóticos o poco conocidos
- Fomentar participación activa y ambiente positivo
- Usar lenguaje claro y sencillo"""


def _generic(opts: ResourceOptions) -> str:
    return f"""Genera un recurso educativo para estudiantes de 2º grado sobre el tema {_v(opts.tema or 'general')}.

IMPORTANTE: Responde ÚNICAMENTE el objeto JSON correspondiente, sin explicaciones ni comentarios."""


_BUILDERS: Dict[ResourceType, Callable[[Any], str]] = {
    ResourceType.EVALUACION: _evaluacion,
    ResourceType.COMPRENSION: _comprension,
    ResourceType.ESCRITURA: _escritura,
    ResourceType.GRAMATICA: _gramatica,
    ResourceType.ORAL: _oral,
    ResourceType.DRAG_AND_DROP: _drag_and_drop,
    ResourceType.ICE_BREAKERS: _ice_breakers,
}


def _enum_or_none(enum_cls, value: Any) -> Optional[Any]:
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        return None


def build_prompt(resource_type: Any, options: Optional[Dict[str, Any]] = None) -> str:
    rtype = ResourceType.parse(resource_type)
    opts = parse_options(rtype, options)
    builder = _BUILDERS.get(rtype, _generic) if rtype else _generic
    return _header(opts) + builder(opts) + "\n\n" + CURRICULUM_REMINDER
