import logging
from langchain_core.runnables import RunnableConfig
from report_summarizer.services.states import SummaryState, PipelineStage

logger = logging.getLogger(__name__)

async def extract_text(state: SummaryState, config: RunnableConfig) -> dict:
    """Step 1: Extract text from the uploaded PDF or image, then drop the temp file"""
    document = state["document"]
    logger.info(f"Step 1: Extracting text from {document}")
    text_extractor = config["configurable"]["text_extractor"]

    try:
        text = await text_extractor.extract(document)
    finally:
        # Temp file goes away whether extraction succeeded or not
        document.release()

    logger.info(f"Text extraction completed: {len(text)} characters")
    return {"stage": PipelineStage.EXTRACTING, "extracted_text": text}
