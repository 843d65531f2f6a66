"""
Question papers controller.
"""

from typing import Any, Mapping, Optional

from academix_admin.controllers.base import AttachableEntityController
from academix_admin.models.attachment import QUESTION_PAPER_PDF, AttachmentPayload
from academix_admin.models.question_paper import QuestionPaper
from academix_admin.notifications import Notifier
from academix_admin.services.file_validation import validate_question_paper_form
from academix_admin.services.question_papers import QuestionPapersService


class QuestionPapersController(AttachableEntityController[QuestionPaper]):
    entity_label = "Question paper"

    def __init__(self, service: QuestionPapersService, notifier: Optional[Notifier] = None, page_size: int = 20):
        super().__init__(service, notifier, page_size)

    async def create_with_pdf(
        self,
        metadata: Mapping[str, Any],
        pdf: Optional[AttachmentPayload] = None,
    ) -> Optional[QuestionPaper]:
        """
        Validate the form values, then create the paper and upload its PDF.

        Invalid values are reported like a failed create (no request is
        made, None is returned).
        """
        validation = validate_question_paper_form(metadata)
        errors = list(validation.errors.values())
        if pdf is not None and pdf.purpose != QUESTION_PAPER_PDF.purpose:
            errors.append(f"Question papers only accept a '{QUESTION_PAPER_PDF.purpose}' attachment")
        if errors:
            message = "; ".join(errors)
            self._state.update(error=message)
            self.notifier.error("Invalid question paper", message)
            return None

        return await self.create_with_attachments(metadata, [pdf] if pdf is not None else [])

    def by_subject(self, subject: str):
        return [p for p in self.items if p.subject.lower() == subject.lower()]

    def by_year_semester(self, year: int, semester: Optional[int] = None):
        return [p for p in self.items if p.year == year and (semester is None or p.semester == semester)]
