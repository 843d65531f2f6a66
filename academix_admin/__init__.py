"""
AcademixStore Admin Client
==========================

Async client for administering the AcademixStore catalog: books, question
papers, colleges, users, students, individual users, system settings and
the dashboard.

Usage:
    from academix_admin.context import AppContext

    async with AppContext.create() as ctx:
        await ctx.auth.login(email="admin@college.edu", password="...")
        book = await ctx.books.create_with_attachments(
            {"name": "Algorithms", "year": 2024, "semester": 3},
            [AttachmentPayload("pdf", "book.pdf", file_path="/tmp/book.pdf")],
        )
"""

__version__ = "1.0.0"
