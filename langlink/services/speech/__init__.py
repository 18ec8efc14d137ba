from langlink.services.speech.recognition import PipelineResult, RecognitionService

__all__ = ["PipelineResult", "RecognitionService"]
