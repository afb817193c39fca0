import logging
import os
from typing import Dict, List, Optional

from google import genai
from google.genai import types

from lingshu.config import API_KEY_ENV, DEFAULT_MODEL_ID, FALLBACK_API_KEY_ENV, MODEL_ENV

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """你是一位经验丰富的中医大师（灵枢）。
你的目标是帮助学生理解中医理论、中药、方剂、针灸和临床技能。
回答要权威且通俗易懂，适当使用比喻。
如果用户咨询医疗建议，请提供中医视角的分析，但必须包含免责声明，建议就医。
请使用 Markdown 格式回答，所有回答必须使用简体中文。"""

EMPTY_REPLY = "大师正在入定中（无回应）。"
FALLBACK_REPLY = "与智慧源泉的连接暂时中断，请检查您的 API 密钥。"
GREETING = "您好，我是灵枢。请问您想了解关于中药、穴位、诊断或方剂的哪些知识？"


def get_api_key() -> str:
    # Read at call time so a late-loaded .env still counts
    return os.environ.get(API_KEY_ENV) or os.environ.get(FALLBACK_API_KEY_ENV) or ""


def get_model_id() -> str:
    return os.environ.get(MODEL_ENV) or DEFAULT_MODEL_ID


def build_prompt(query: str, context: Optional[str] = None) -> str:
    if context:
        return f"上下文信息: {context}\n\n问题: {query}"
    return query


def call_gemini(prompt_text: str) -> str:
    api_key = get_api_key()
    if not api_key:
        logger.warning("API Key is missing. AI features will not work.")
        raise ValueError("Google API Key missing")

    client = genai.Client(api_key=api_key)
    response = client.models.generate_content(
        model=get_model_id(),
        contents=prompt_text,
        config=types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
        ),
    )
    return response.text


def ask(query: str, context: Optional[str] = None) -> str:
    """
    Asks the 灵枢 persona a question. Always returns text: the model's reply,
    or a fixed fallback if anything on the way fails.
    """
    try:
        logger.info(f"Asking Gemini ({get_model_id()}): {query[:40]}")
        text = call_gemini(build_prompt(query, context))
        return text or EMPTY_REPLY
    except Exception as e:
        logger.error(f"Gemini Error: {e}")
        return FALLBACK_REPLY


class ChatSession:
    """Message history for the chat view; one request in flight at a time."""

    def __init__(self):
        self.messages: List[Dict[str, str]] = [{"role": "model", "text": GREETING}]
        self.loading = False

    def send(self, text: str, context: Optional[str] = None) -> Optional[str]:
        if not text or not text.strip():
            return None
        if self.loading:
            logger.debug("Chat busy; ignoring duplicate send.")
            return None

        self.messages.append({"role": "user", "text": text})
        self.loading = True
        try:
            reply = ask(text, context)
        finally:
            self.loading = False

        self.messages.append({"role": "model", "text": reply})
        return reply
