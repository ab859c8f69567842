import json
import logging
import sys
from dataclasses import dataclass

import google.generativeai as genai
from openai import AzureOpenAI

from aiproviders import get_current_provider
from aiproviders import missing_credentials
from errorlog import ErrorLogError
from errorlog import read_last_entry

logger = logging.getLogger(__name__)

# Returned whenever no actionable command was produced. Never execute it.
SENTINEL = "3d8a19a704"

DEFAULT_GEMINI_MODEL = "gemini-1.5-pro"
DEFAULT_AZURE_API_VERSION = "2023-05-15"
AZURE_MAX_TOKENS = 100
AZURE_TEMPERATURE = 0.7

ERROR_INSTRUCTION = f"""
- **Note:** If you're unsure of the correct response, or prefer not to answer for any reason, reply only with the UUID: {SENTINEL}.
- As an intelligent assistant, interpret the user's intent accurately. Provide precise shell commands in response, based on your analysis of the user's input and any errors they encountered.
- Your goal is to assist the user by giving them only the correct command they need to execute, formatted without explanations or additional details. Assume the user has a minimal shell environment installed and respond with the exact command they should run.
- Be concise and efficient, responding with only the command.
- platform {sys.platform}
"""

MESSAGE_INSTRUCTION = f"""
- **Note:** If you're unsure of the correct response, or prefer not to answer for any reason, reply only with the UUID: {SENTINEL}.
- You are a command-line assistant, helping users run commands in a shell environment. Analyze the user's input and determine the exact shell command they need to execute, assuming they have a basic installation.
- Respond solely with the unformatted command line instruction, omitting any explanations or extraneous text.
- Focus on providing precise commands, interpreting user input efficiently and accurately to meet their needs.
- platform {sys.platform}
"""


@dataclass(frozen=True)
class Suggestion:
    """
    Outcome of one generation request.

    status is "ok", "declined" (the model answered with the sentinel) or
    "failed" (no usable answer). text is always safe to print: the command,
    or the sentinel for anything but "ok".
    """
    status: str
    command: str | None = None
    error: str | None = None

    @property
    def text(self) -> str:
        return self.command if self.status == "ok" and self.command else SENTINEL

    @classmethod
    def from_response(cls, raw: str | None) -> "Suggestion":
        command = first_line(raw or "")
        if not command:
            return cls("failed", error="empty response")
        if command == SENTINEL:
            return cls("declined")
        return cls("ok", command=command)

    @classmethod
    def failure(cls, error) -> "Suggestion":
        return cls("failed", error=str(error))


# ----------------------------
# Prompt building
# ----------------------------

def first_line(text: str) -> str:
    return text.split("\n", 1)[0].strip()


def build_error_prompt(entry) -> str:
    payload = json.dumps(entry, separators=(",", ":"), ensure_ascii=False)
    return f"{ERROR_INSTRUCTION}\n{payload}"


def build_message_prompt(message: str) -> str:
    return f"{MESSAGE_INSTRUCTION}\n{message}"


# ----------------------------
# Backends
# ----------------------------

def call_gemini(prompt: str, cfg: dict) -> Suggestion:
    missing = missing_credentials(cfg, "gemini")
    if missing:
        logger.error("Gemini is not configured, missing: %s", ", ".join(missing))
        return Suggestion.failure(f"missing {', '.join(missing)}")

    try:
        genai.configure(api_key=cfg["gemini_apiKey"])
        model = genai.GenerativeModel(cfg.get("gemini_model") or DEFAULT_GEMINI_MODEL)

        response = model.generate_content(prompt)
        return Suggestion.from_response(response.text)
    except Exception as e:
        logger.error("Error calling Gemini: %s", e)
        return Suggestion.failure(e)


def call_azure(prompt: str, cfg: dict) -> Suggestion:
    missing = missing_credentials(cfg, "azure")
    if missing:
        logger.error("Azure OpenAI is not configured, missing: %s", ", ".join(missing))
        return Suggestion.failure(f"missing {', '.join(missing)}")

    try:
        client = AzureOpenAI(
            api_key=cfg["azure_apiKey"],
            azure_endpoint=cfg["azure_endpoint"],
            api_version=cfg.get("azure_apiVersion") or DEFAULT_AZURE_API_VERSION,
            max_retries=0,
        )

        response = client.chat.completions.create(
            model=cfg["azure_deploymentName"],
            messages=[{"role": "user", "content": prompt}],
            max_tokens=AZURE_MAX_TOKENS,
            temperature=AZURE_TEMPERATURE,
        )
        return Suggestion.from_response(response.choices[0].message.content)
    except Exception as e:
        logger.error("Error calling Azure OpenAI: %s", e)
        return Suggestion.failure(e)


BACKENDS = {
    "gemini": call_gemini,
    "azure": call_azure,
}


def call_ai(prompt: str, cfg: dict, provider: str | None = None) -> Suggestion:
    provider = provider or get_current_provider(cfg)
    backend = BACKENDS.get(provider)
    if backend is None:
        logger.error("Unsupported provider %r", provider)
        return Suggestion.failure(f"unsupported provider {provider!r}")

    logger.debug("Dispatching prompt to %s", provider)
    return backend(prompt, cfg)


# ----------------------------
# Exported operations
# ----------------------------

def suggest_for_error(cfg: dict, provider: str | None = None, log_path: str | None = None) -> Suggestion:
    try:
        entry = read_last_entry(log_path)
    except (OSError, ErrorLogError) as e:
        logger.error("Error generating command: %s", e)
        return Suggestion.failure(e)

    if entry is None:
        return Suggestion.failure("no error log entry")

    return call_ai(build_error_prompt(entry), cfg, provider)


def suggest_for_message(message: str, cfg: dict, provider: str | None = None) -> Suggestion:
    if not (message or "").strip():
        logger.error("Error generating command: empty message")
        return Suggestion.failure("empty message")

    return call_ai(build_message_prompt(message), cfg, provider)


def generate_command_for_error(cfg: dict, provider: str | None = None, log_path: str | None = None) -> str:
    """Suggest a fix for the most recent failed command in the error log."""
    return suggest_for_error(cfg, provider, log_path).text


def generate_command_for_message(message: str, cfg: dict, provider: str | None = None) -> str:
    """Suggest a command for a free-text request."""
    return suggest_for_message(message, cfg, provider).text
