"""
Quiz store backed by a JSON document on disk.
"""
import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from .models import QuizRecord


class QuizStoreError(Exception):
    """Base exception for quiz store failures."""
    pass


class QuizValidationError(QuizStoreError):
    """Raised when a question or answer fails validation."""

    def __init__(self, messages: Dict[str, str]):
        self.messages = dict(messages)
        super().__init__("; ".join(self.messages.values()))


class QuizNotFoundError(QuizStoreError):
    """Raised when updating a quiz id that does not exist."""

    def __init__(self, quiz_id: int):
        self.quiz_id = quiz_id
        super().__init__(f"No quiz with id {quiz_id}")


class QuizStore:
    """
    Persistent keyed collection of quiz records.

    Every public method re-reads the document so that concurrent sessions
    always see fresh state. Writes are serialized through an asyncio lock
    and replace the file atomically.
    """

    SAMPLE_QUIZZES = [
        {"question": "Capital de Italia", "answer": "Roma"},
        {"question": "Capital de Francia", "answer": "París"},
        {"question": "Capital de España", "answer": "Madrid"},
        {"question": "Capital de Portugal", "answer": "Lisboa"},
    ]

    EMPTY_QUESTION_MESSAGE = "The question cannot be empty"
    EMPTY_ANSWER_MESSAGE = "The answer cannot be empty"
    DUPLICATE_QUESTION_MESSAGE = "That question already exists"

    def __init__(self, db_path: str = "./quizzes.json"):
        """
        Initialize QuizStore with the path of its JSON document.

        Args:
            db_path: Path to the JSON file holding the quizzes
        """
        self.db_path = Path(db_path)
        self.logger = logging.getLogger(__name__)
        self._lock = asyncio.Lock()

    async def list_all(self) -> List[QuizRecord]:
        """
        Get every quiz in store order (ascending id).

        Returns:
            List of QuizRecord objects
        """
        document = await self._load()
        return self._parse_records(document)

    async def get_by_id(self, quiz_id: int) -> Optional[QuizRecord]:
        """
        Retrieve a single quiz.

        Args:
            quiz_id: Identifier assigned by the store

        Returns:
            The QuizRecord, or None if no quiz has that id
        """
        for record in await self.list_all():
            if record.id == quiz_id:
                return record
        return None

    async def count(self) -> int:
        """Get the number of stored quizzes."""
        return len(await self.list_all())

    async def create(self, question: str, answer: str) -> QuizRecord:
        """
        Add a new quiz.

        Args:
            question: Question text, trimmed before saving
            answer: Answer text, trimmed before saving

        Returns:
            The stored QuizRecord with its assigned id

        Raises:
            QuizValidationError: If a field is empty or the question is not unique
        """
        question, answer = (question or "").strip(), (answer or "").strip()
        async with self._lock:
            document = await self._load()
            records = self._parse_records(document)
            self._validate_fields(question, answer, records)

            record = QuizRecord(document["next_id"], question, answer)
            document["quiz"].append(record.to_dict())
            document["next_id"] = record.id + 1
            await self._save(document)

        self.logger.info(
            f"Created quiz {record.id}",
            extra={'event_type': 'quiz_created', 'quiz_id': record.id}
        )
        return record

    async def update(self, quiz_id: int, question: str, answer: str) -> QuizRecord:
        """
        Replace the question and answer of an existing quiz.

        Raises:
            QuizNotFoundError: If no quiz has that id
            QuizValidationError: If a field is empty or the question is not unique
        """
        question, answer = (question or "").strip(), (answer or "").strip()
        async with self._lock:
            document = await self._load()
            records = self._parse_records(document)
            if not any(record.id == quiz_id for record in records):
                raise QuizNotFoundError(quiz_id)
            self._validate_fields(question, answer, records, exclude_id=quiz_id)

            record = QuizRecord(quiz_id, question, answer)
            document["quiz"] = [
                record.to_dict() if item["id"] == quiz_id else item
                for item in document["quiz"]
            ]
            await self._save(document)

        self.logger.info(
            f"Updated quiz {quiz_id}",
            extra={'event_type': 'quiz_updated', 'quiz_id': quiz_id}
        )
        return record

    async def delete_by_id(self, quiz_id: int) -> bool:
        """
        Delete a quiz. Deleting a missing id is not an error.

        Returns:
            True if a quiz was removed, False if none matched
        """
        async with self._lock:
            document = await self._load()
            kept = [item for item in document["quiz"] if item["id"] != quiz_id]
            if len(kept) == len(document["quiz"]):
                self.logger.debug(f"Delete of missing quiz {quiz_id} ignored")
                return False
            document["quiz"] = kept
            await self._save(document)

        self.logger.info(
            f"Deleted quiz {quiz_id}",
            extra={'event_type': 'quiz_deleted', 'quiz_id': quiz_id}
        )
        return True

    async def seed_if_empty(self) -> int:
        """
        Fill an empty store with the sample capitals quizzes.

        Returns:
            Number of quizzes created
        """
        if await self.count():
            return 0
        created = 0
        for sample in self.SAMPLE_QUIZZES:
            await self.create(sample["question"], sample["answer"])
            created += 1
        self.logger.info(f"Seeded store {self.db_path} with {created} sample quizzes")
        return created

    def validate_store_structure(self, data: dict) -> bool:
        """
        Validate that JSON data has the expected store structure.

        Expected structure:
        {
            "next_id": int,
            "quiz": [
                {"id": int, "question": str, "answer": str}
            ]
        }

        Args:
            data: Parsed JSON data to validate

        Returns:
            True if structure is valid, False otherwise
        """
        if not isinstance(data, dict):
            self.logger.error("Store data must be a JSON object")
            return False

        if not isinstance(data.get("next_id"), int):
            self.logger.error("Store data must contain an integer 'next_id'")
            return False

        quiz_array = data.get("quiz")
        if not isinstance(quiz_array, list):
            self.logger.error("'quiz' value must be an array")
            return False

        seen_ids = set()
        for i, item in enumerate(quiz_array):
            if not isinstance(item, dict):
                self.logger.error(f"Quiz {i} must be an object")
                return False

            if not isinstance(item.get("id"), int):
                self.logger.error(f"Quiz {i} 'id' field must be an integer")
                return False

            if item["id"] in seen_ids or item["id"] >= data["next_id"]:
                self.logger.error(f"Quiz {i} has a duplicate or out of range id {item['id']}")
                return False
            seen_ids.add(item["id"])

            for field_name in ("question", "answer"):
                if not isinstance(item.get(field_name), str):
                    self.logger.error(f"Quiz {i} '{field_name}' field must be a string")
                    return False

        return True

    def _validate_fields(
        self,
        question: str,
        answer: str,
        records: List[QuizRecord],
        exclude_id: Optional[int] = None
    ) -> None:
        messages: Dict[str, str] = {}
        if not question:
            messages["question"] = self.EMPTY_QUESTION_MESSAGE
        elif any(r.question == question and r.id != exclude_id for r in records):
            messages["question"] = self.DUPLICATE_QUESTION_MESSAGE
        if not answer:
            messages["answer"] = self.EMPTY_ANSWER_MESSAGE
        if messages:
            self.logger.warning(f"Quiz validation failed: {messages}")
            raise QuizValidationError(messages)

    def _parse_records(self, document: dict) -> List[QuizRecord]:
        records = [
            QuizRecord(item["id"], item["question"], item["answer"])
            for item in document["quiz"]
        ]
        return sorted(records, key=lambda record: record.id)

    async def _load(self) -> dict:
        return await asyncio.to_thread(self._read_document)

    async def _save(self, document: dict) -> None:
        await asyncio.to_thread(self._write_document, document)

    def _read_document(self) -> dict:
        if not self.db_path.exists():
            return {"next_id": 1, "quiz": []}
        try:
            with open(self.db_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self.logger.error(f"Invalid JSON in {self.db_path}: {e}")
            raise QuizStoreError(f"Quiz database {self.db_path} is not valid JSON") from e
        except OSError as e:
            self.logger.error(f"Failed to read quiz database {self.db_path}: {e}")
            raise QuizStoreError(f"Cannot read quiz database {self.db_path}") from e

        if not self.validate_store_structure(data):
            raise QuizStoreError(f"Quiz database {self.db_path} has an invalid structure")
        return data

    def _write_document(self, document: dict) -> None:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                dir=self.db_path.parent, prefix=".quizzes-", suffix=".json"
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(document, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.db_path)
            except BaseException:
                Path(temp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            self.logger.error(f"Failed to write quiz database {self.db_path}: {e}")
            raise QuizStoreError(f"Cannot write quiz database {self.db_path}") from e
