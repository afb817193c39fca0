import os
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

sys.path.append(str(Path(__file__).resolve().parent.parent))

from lingshu import oracle
from lingshu.oracle import (
    EMPTY_REPLY,
    FALLBACK_REPLY,
    GREETING,
    SYSTEM_INSTRUCTION,
    ChatSession,
    ask,
    build_prompt,
)

NO_KEYS = {"GOOGLE_API_KEY": "", "GEMINI_API_KEY": ""}


def make_client(text="麻黄发汗解表。"):
    mock_client = MagicMock()
    mock_response = MagicMock()
    mock_response.text = text
    mock_client.models.generate_content.return_value = mock_response
    return mock_client


def test_build_prompt():
    assert build_prompt("麻黄的功效？") == "麻黄的功效？"
    assert build_prompt("功效？", "麻黄") == "上下文信息: 麻黄\n\n问题: 功效？"


def test_ask_success():
    with patch("lingshu.oracle.genai") as mock_genai, patch("lingshu.oracle.types") as mock_types:
        with patch.dict(os.environ, {"GOOGLE_API_KEY": "fake_key"}):
            mock_client = make_client()
            mock_genai.Client.return_value = mock_client

            result = ask("麻黄的功效？", "中药学")

            assert result == "麻黄发汗解表。"
            mock_genai.Client.assert_called_with(api_key="fake_key")
            _, kwargs = mock_client.models.generate_content.call_args
            assert kwargs["contents"] == "上下文信息: 中药学\n\n问题: 麻黄的功效？"
            mock_types.GenerateContentConfig.assert_called_with(
                system_instruction=SYSTEM_INSTRUCTION
            )


def test_fallback_key_variable():
    with patch("lingshu.oracle.genai") as mock_genai:
        with patch.dict(os.environ, {"GOOGLE_API_KEY": "", "GEMINI_API_KEY": "other_key"}):
            mock_genai.Client.return_value = make_client()
            ask("问题")
            mock_genai.Client.assert_called_with(api_key="other_key")


def test_missing_key_returns_fallback():
    with patch("lingshu.oracle.genai") as mock_genai:
        with patch.dict(os.environ, NO_KEYS):
            assert ask("麻黄的功效？") == FALLBACK_REPLY
            mock_genai.Client.assert_not_called()


def test_transport_error_returns_fallback():
    with patch("lingshu.oracle.genai") as mock_genai:
        with patch.dict(os.environ, {"GOOGLE_API_KEY": "fake_key"}):
            mock_genai.Client.return_value.models.generate_content.side_effect = (
                ConnectionError("boom")
            )
            assert ask("问题") == FALLBACK_REPLY


def test_empty_text():
    with patch("lingshu.oracle.genai") as mock_genai:
        with patch.dict(os.environ, {"GOOGLE_API_KEY": "fake_key"}):
            mock_genai.Client.return_value = make_client(text=None)
            assert ask("问题") == EMPTY_REPLY


def test_chat_session_history():
    chat = ChatSession()
    assert chat.messages == [{"role": "model", "text": GREETING}]

    with patch.object(oracle, "ask", return_value="答复") as mock_ask:
        assert chat.send("什么是八纲？") == "答复"
        assert chat.send("   ") is None
        mock_ask.assert_called_once_with("什么是八纲？", None)

    assert [m["role"] for m in chat.messages] == ["model", "user", "model"]
    assert chat.loading is False


def test_chat_session_refuses_while_pending():
    chat = ChatSession()
    chat.loading = True
    with patch.object(oracle, "ask") as mock_ask:
        assert chat.send("问题") is None
        mock_ask.assert_not_called()
    assert len(chat.messages) == 1


def test_model_from_environment():
    with patch("lingshu.oracle.genai") as mock_genai:
        with patch.dict(os.environ, {"GOOGLE_API_KEY": "fake_key", "LINGSHU_MODEL": "gemini-test-model"}):
            mock_client = make_client()
            mock_genai.Client.return_value = mock_client
            ask("问题")
            _, kwargs = mock_client.models.generate_content.call_args
            assert kwargs["model"] == "gemini-test-model"


def test_default_model():
    with patch("lingshu.oracle.genai") as mock_genai:
        with patch.dict(os.environ, {"GOOGLE_API_KEY": "fake_key"}):
            os.environ.pop("LINGSHU_MODEL", None)
            mock_client = make_client()
            mock_genai.Client.return_value = mock_client
            ask("问题")
            _, kwargs = mock_client.models.generate_content.call_args
            assert kwargs["model"] == "gemini-2.5-flash"
