"""Web routes for the file merger application."""

from __future__ import annotations

from flask import Blueprint, Response, render_template, request, send_file

from mergefiles.core import MergeConfig, MergeOutput, SourceInput, merge_streams
from mergefiles.errors import EmptyInput

bp = Blueprint("routes", __name__)


@bp.get("/")
def merge_form() -> str:
    """Render the upload interface for merging PDFs and images."""

    return render_template("upload.html")


@bp.post("/merge")
def merge() -> Response | tuple[str, int]:
    """Accept uploaded PDFs and images and return the merged output."""

    uploaded_files = request.files.getlist("files")
    if not uploaded_files:
        return "No files were uploaded.", 400

    config = MergeConfig(password=request.form.get("shared_password") or None)

    source_inputs: list[SourceInput] = []
    for storage in uploaded_files:
        if not storage.filename:
            continue
        source_inputs.append(SourceInput(name=storage.filename, stream=storage.stream))

    try:
        merge_result: MergeOutput = merge_streams(source_inputs, config)
    except EmptyInput:
        return "No PDF or image files were provided.", 400

    if not merge_result.has_output or merge_result.buffer is None:
        message = "Unable to merge the provided files."
        if merge_result.failed_files:
            failed_list = ", ".join(merge_result.failed_files)
            message = f"Unable to merge the provided files. Failed: {failed_list}."
        return message, 400

    response = send_file(
        merge_result.buffer,
        mimetype="application/pdf",
        as_attachment=True,
        download_name=MergeConfig().output_path,
    )

    if merge_result.failed_files:
        response.headers["X-MergeFiles-Failed"] = ",".join(merge_result.failed_files)
    if merge_result.skipped_files:
        response.headers["X-MergeFiles-Skipped"] = ",".join(merge_result.skipped_files)

    response.headers["X-MergeFiles-Merged-Count"] = str(merge_result.merged_count)
    response.headers["X-MergeFiles-Page-Count"] = str(merge_result.page_count)
    return response
