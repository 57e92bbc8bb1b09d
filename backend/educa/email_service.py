from __future__ import annotations
import httpx
import logging
from typing import Any, Dict, Optional
from .settings import settings

logger = logging.getLogger(__name__)

EMAIL_TIMEOUT_SECONDS = 15


class EmailDeliveryError(RuntimeError):
	pass


def _recovery_code_html(code: str, ttl_minutes: int) -> str:
	return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1 style="color: #3b82f6; text-align: center;">Educa Recursos</h1>
  <div style="background-color: #f8fafc; padding: 20px; border-radius: 8px; border-left: 4px solid #3b82f6;">
    <h2 style="color: #334155; margin-top: 0;">Recuperación de contraseña</h2>
    <p style="color: #64748b;">Has solicitado recuperar tu contraseña. Usa el siguiente código para continuar:</p>
    <p style="text-align: center; margin: 30px 0;">
      <span style="background-color: #3b82f6; color: white; padding: 15px 30px; font-size: 24px; font-weight: bold; border-radius: 8px; letter-spacing: 3px;">{code}</span>
    </p>
    <p style="color: #64748b;">Este código expira en {ttl_minutes} minutos.</p>
    <p style="color: #64748b; font-size: 14px;">Si no solicitaste este código, puedes ignorar este email.</p>
  </div>
</div>
""".strip()


async def send_transactional_email(payload: Dict[str, Any], *, transport: Optional[httpx.AsyncBaseTransport] = None) -> Dict[str, Any]:
	headers = {
		"accept": "application/json",
		"api-key": settings.brevo_api_key or "",
		"content-type": "application/json",
	}
	async with httpx.AsyncClient(timeout=EMAIL_TIMEOUT_SECONDS, transport=transport) as client:
		response = await client.post(settings.brevo_base_url, headers=headers, json=payload)
		response.raise_for_status()
		if not response.text:
			return {}
		try:
			return response.json()
		except ValueError:
			return {}


async def send_recovery_code(email: str, code: str, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> bool:
	"""Email a password recovery code. Returns False when email is not configured."""
	if not settings.brevo_api_key or not settings.email_sender:
		logger.warning("Recovery email to %s skipped: Brevo not configured", email)
		return False
	payload: Dict[str, Any] = {
		"sender": {"email": settings.email_sender, "name": settings.email_sender_name},
		"to": [{"email": email}],
		"subject": "Código de recuperación de contraseña - Educa Recursos",
		"htmlContent": _recovery_code_html(code, settings.recovery_code_ttl_minutes),
	}
	try:
		info = await send_transactional_email(payload, transport=transport)
	except httpx.HTTPError as err:
		logger.error("Error sending recovery email to %s: %s", email, err)
		raise EmailDeliveryError("Error al enviar el código de recuperación") from err
	logger.info("Recovery email sent to %s (messageId=%s)", email, info.get("messageId"))
	return True
