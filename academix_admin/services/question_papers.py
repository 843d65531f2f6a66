"""
Question papers API service: CRUD on `question-papers` and PDF upload.
"""

from typing import Optional, Union

from academix_admin.models.attachment import QUESTION_PAPER_PDF, AttachmentPayload, FileReference
from academix_admin.models.question_paper import QuestionPaper
from academix_admin.models.roles import AccessModule
from academix_admin.services.base import AttachableResourceService


class QuestionPapersService(AttachableResourceService[QuestionPaper]):
    collection = "question-papers"
    record_key = "question_paper"
    list_key = "question_papers"
    model = QuestionPaper
    module = AccessModule.QUESTION_PAPERS
    attachment_kinds = {QUESTION_PAPER_PDF.purpose: QUESTION_PAPER_PDF}

    async def upload_pdf(
        self,
        question_paper_id: str,
        file_name: str,
        file_path: Optional[str] = None,
        file_bytes: Optional[Union[bytes, bytearray]] = None,
    ) -> FileReference:
        """
        Upload the paper's PDF (multipart field `question_paper`).

        The response carries {question_paper_id, pdf_url, signed_url,
        original_name}; `signed_url` becomes `pdf_access_url`.
        """
        payload = AttachmentPayload(
            QUESTION_PAPER_PDF.purpose, file_name, file_path=file_path,
            file_bytes=bytes(file_bytes) if file_bytes is not None else None,
        )
        return await self.upload_attachment(question_paper_id, payload)
