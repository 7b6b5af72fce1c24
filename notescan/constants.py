"""All magic values live here — no inline literals anywhere else."""

# Telegram typing indicator re-send interval (seconds).
# The TYPING action expires after ~5 s, so we refresh every 4 s.
TELEGRAM_TYPING_INTERVAL: float = 4.0
TELEGRAM_MAX_MESSAGE_LENGTH = 4096

# Capture
MIN_IMAGES = 3
PREVIEW_SIZE = (320, 320)
PREVIEW_DIR_PREFIX = "notescan-"
SUPPORTED_IMAGE_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}

# Vision backends
CLAUDE_VISION_MODEL = "claude-opus-4-6"
OPENAI_VISION_MODEL = "gpt-4o"
DEFAULT_MAX_OUTPUT_TOKENS = 4096
PROVIDER_CLAUDE = "claude"
PROVIDER_OPENAI = "openai"

# Transcription instruction. Bump PROMPT_VERSION whenever the text changes.
PROMPT_VERSION = "2"
TRANSCRIPTION_PROMPT = (
    "Actúa como un experto transcriptor de documentos académicos y caligrafía.\n"
    "\n"
    "Instrucciones:\n"
    "1. Analiza estas imágenes que corresponden a los mismos apuntes "
    "(pueden ser varias páginas o varias tomas de la misma página).\n"
    "2. Tu objetivo es extraer TODO el texto visible y convertirlo en un formato digital limpio.\n"
    "3. Si hay solapamientos entre las fotos, úsalos para confirmar el texto.\n"
    "4. ESTRUCTURA EL TEXTO: Usa formato claro con títulos, viñetas (-) para listas, "
    "y párrafos bien separados.\n"
    "5. Ignora elementos que no sean parte del apunte (dedos, mesa, sombras).\n"
    "6. Si algo es ilegible, marca la zona como [ilegible].\n"
    "\n"
    "IMPORTANTE: Devuelve el texto listo para ser impreso en un documento formal. "
    "No incluyas saludos, ni introducciones como \"Aquí está la transcripción\". "
    "Solo el contenido del apunte."
)

# Export
EXPORT_FILENAME = "Apuntes-%s.%s"
EXPORT_TITLE = "Transcripción de Apuntes"
EXPORT_GENERATED_ON = "Generado el %s"
EXPORT_REVIEW_NOTE = "Revisa el texto por posibles errores de interpretación de caligrafía."
EXPORT_WEEKDAYS = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")
EXPORT_MONTHS = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)

# Log messages
MSG_BOT_STARTING = "Starting notescan bot…"
MSG_BLOCKED_CHAT = "Blocked update from chat_id: %s"
MSG_LOG_IMAGES_ADDED = "Added %d image(s) to session %s (total %d)"
MSG_LOG_DECODE_FAILED = "Could not decode %s: %s"
MSG_LOG_TRANSCRIBING = "→ %s: transcribing %d image(s) with prompt v%s"
MSG_LOG_TRANSCRIBED = "✓ Transcribed %d image(s) in %.1fs"
MSG_LOG_PROVIDER_ERROR = "Vision provider error"
MSG_LOG_EMPTY_RESPONSE = "Vision provider returned no text"
MSG_LOG_SEND_FAILED = "Telegram send failed: %s"
MSG_LOG_TYPING_FAILED = "Typing action for chat %s failed: %s"

# User-facing messages
MSG_NO_TEXT_EXTRACTED = "No se pudo extraer texto de las imágenes."
MSG_TRANSCRIPTION_FAILED_CLIENT = (
    "Error al procesar las imágenes. Asegúrate de que sean claras."
)
MSG_TRANSCRIPTION_FAILED = (
    "Hubo un error procesando tus apuntes. Intenta nuevamente con fotos más claras."
)
MSG_INSUFFICIENT_IMAGES = (
    "Por favor sube al menos %d fotos para asegurar la precisión."
)
MSG_DECODE_FAILED = (
    "No se pudo leer «%s» como imagen. Ninguna foto de este envío fue agregada."
)
MSG_SESSION_BUSY = "Estoy procesando tus apuntes, espera a que termine."
MSG_SESSION_FINISHED = "Ya transcribiste estos apuntes. Usa /nuevo para empezar otro escaneo."
MSG_SESSION_RESTARTED = "El escaneo se reinició mientras leía tus fotos. Envíalas de nuevo."
MSG_UNEXPECTED_ERROR = "Ocurrió un error inesperado. Intenta nuevamente."
MSG_IMAGES_ADDED = "Foto agregada ({count}). {hint}"
MSG_IMAGES_MISSING = "Faltan {missing} para continuar."
MSG_IMAGES_READY = "Usa /transcribir cuando estés listo."
MSG_NO_IMAGES = "Aún no has subido fotos."
MSG_IMAGE_LIST_HEADER = "Fotos seleccionadas ({count}):"
MSG_IMAGE_LIST_ITEM = "  {position}. {name}"
MSG_IMAGE_REMOVED = "Foto {position} eliminada. Quedan {count}."
MSG_REMOVE_USAGE = "Uso: /quitar <número de foto> (ver /fotos)"
MSG_NEW_SESSION = "Nuevo escaneo — sube tus fotos."
MSG_RESULT_FILES = "Descarga el TXT o abre el HTML y usa Imprimir → Guardar como PDF."
MSG_STATUS = (
    "Estado\n"
    "  Sesión  : {state}\n"
    "  Fotos   : {count} (mínimo {minimum})\n"
    "  Modelo  : {model}\n"
)

# Commands
CMD_START = "start"
CMD_HELP = "help"
CMD_TRANSCRIBE = "transcribir"
CMD_LIST = "fotos"
CMD_REMOVE = "quitar"
CMD_NEW = "nuevo"
CMD_STATUS = "estado"

MSG_HELP = (
    "Transcriptor de Apuntes\n"
    "\n"
    "Envía fotos de tus cuadernos (cursiva o molde). Necesitas al menos 3 fotos\n"
    "del mismo apunte: mientras más fotos subas, menor será el margen de error.\n"
    "\n"
    "Comandos:\n"
    "  /transcribir   — transcribir las fotos subidas\n"
    "  /fotos         — ver las fotos seleccionadas\n"
    "  /quitar <n>    — quitar la foto número n\n"
    "  /nuevo         — empezar un nuevo escaneo\n"
    "  /estado        — estado de la sesión\n"
    "  /help          — mostrar este mensaje\n"
)
