"""Business Logic Services.

This package contains the client resilience layer of LangLink: the logic
that decides whether to call a remote provider at all, deduplicates and
schedules requests, caches results, arbitrates audio playback and degrades
gracefully when connectivity or provider calls fail.

Service Categories:
- Core: Fingerprints, shared models, durable record storage
- Translation: Cache, request scheduler, translation service
- Audio: Playback arbitration, device output, on-device synthesis
- Speech: Recorded speech input (speech-to-text)
- Network / Metrics / History / Preferences: process-wide state

External integrations:
- gcp: Vertex AI Gemini translation, Google Cloud Speech and TTS
"""
