from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from langlink.api.deps import get_services
from langlink.api.translation import outcome_response
from langlink.schemas.translation import SpeechTranscriptionResponse
from langlink.services.container import AppServices
from langlink.services.core.models import Language

router = APIRouter()


@router.post("/speech/transcribe", response_model=SpeechTranscriptionResponse)
async def transcribe(
    file: UploadFile = File(...),
    source_code: str = Form(...),
    source_name: str = Form(...),
    target_code: Optional[str] = Form(None),
    target_name: Optional[str] = Form(None),
    services: AppServices = Depends(get_services),
):
    """
    Transcribe a recorded LINEAR16 clip (multipart/form-data).

    When a target language is given the transcript is translated as well.
    """
    audio = await file.read()
    if not audio:
        raise HTTPException(status_code=422, detail="Empty audio upload")

    source = Language(code=source_code, name=source_name)
    if target_code and target_name:
        result = await services.recognition.transcribe_and_translate(
            audio, source, Language(code=target_code, name=target_name)
        )
        return SpeechTranscriptionResponse(
            transcript=result.transcript,
            translation=outcome_response(result.outcome),
        )

    transcript = await services.recognition.transcribe(audio, source)
    return SpeechTranscriptionResponse(transcript=transcript)
