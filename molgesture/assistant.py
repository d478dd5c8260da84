"""
Molecule explanation and chat using Google Gemini.
"""
import logging
import os
from typing import List, Optional

import google.generativeai as genai
from dotenv import load_dotenv

from .config import Cfg
from .types import ChatMessage

logger = logging.getLogger(__name__)

EXPLAIN_FALLBACK = "Failed to retrieve explanation. The AI service might be temporarily unavailable."
CHAT_FALLBACK = "Error communicating with AI."
DISABLED_MESSAGE = "Assistant disabled: GOOGLE_API_KEY not set."


class MoleculeAssistant:
    """Structural biology assistant for the molecule on screen."""

    def __init__(self, cfg: Cfg, api_key: Optional[str] = None):
        """
        Configure Gemini.

        Args:
            cfg: Application configuration
            api_key: Overrides GOOGLE_API_KEY from the environment / .env
        """
        load_dotenv()
        self.cfg = cfg
        self.api_key = api_key or os.getenv("GOOGLE_API_KEY")

        if self.api_key:
            genai.configure(api_key=self.api_key)
        else:
            logger.warning("GOOGLE_API_KEY not found. Molecule assistant is disabled.")

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def _model(self, system_instruction: Optional[str] = None):
        return genai.GenerativeModel(self.cfg.assistant.model, system_instruction=system_instruction)

    def explain(self, pdb_id: str) -> str:
        """
        Short explanation of a structure's biological role.

        Returns:
            Explanation text, or a fallback message if the service fails
        """
        if not self.enabled:
            return DISABLED_MESSAGE

        prompt = (
            f'Explain the biological significance, structure, and function of the protein '
            f'with PDB ID "{pdb_id}". Keep it concise (under {self.cfg.assistant.max_words} words) '
            f'and suitable for a biology student.'
        )
        try:
            response = self._model().generate_content(prompt)
            return response.text or "No explanation available."
        except Exception as e:
            logger.error(f"Gemini explanation failed for {pdb_id}: {e}")
            return EXPLAIN_FALLBACK

    def chat(self, history: List[ChatMessage], message: str, pdb_id: str) -> ChatMessage:
        """
        Answer a question about the molecule being viewed.

        Args:
            history: Previous turns; error turns are not replayed to the model
            message: New user question
            pdb_id: Structure currently displayed

        Returns:
            Model reply, flagged as an error if the service failed
        """
        if not self.enabled:
            return ChatMessage(role="model", text=DISABLED_MESSAGE, is_error=True)

        system_instruction = (
            f"You are a helpful structural biology assistant. The user is currently looking at "
            f"a 3D model of PDB ID: {pdb_id}. Answer their questions specifically about this molecule."
        )
        prompt = f"Context: User is viewing protein {pdb_id}.\nQuestion: {message}"
        past = [
            {"role": turn.role, "parts": [turn.text]}
            for turn in history
            if not turn.is_error
        ]

        try:
            session = self._model(system_instruction).start_chat(history=past)
            response = session.send_message(prompt)
            return ChatMessage(role="model", text=response.text or "I couldn't understand that.")
        except Exception as e:
            logger.error(f"Gemini chat failed: {e}")
            return ChatMessage(role="model", text=CHAT_FALLBACK, is_error=True)
