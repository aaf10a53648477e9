import logging
from langchain_core.runnables import RunnableConfig
from report_summarizer.services.states import SummaryState, PipelineStage
from report_summarizer.services.processors.prompt_builder import build_summary_prompt
from report_summarizer.services.processors.result_parser import parse_summary, FallbackSummary

logger = logging.getLogger(__name__)

def build_prompt(state: SummaryState) -> dict:
    """Step 3: Render the summary prompt around the extracted text"""
    logger.info("Step 3: Building summary prompt")
    prompt = build_summary_prompt(state["extracted_text"])
    return {"stage": PipelineStage.PROMPTING, "prompt": prompt}

async def request_completion(state: SummaryState, config: RunnableConfig) -> dict:
    """Step 4: Ask the completion service for the summary (single call, no retry)"""
    logger.info("Step 4: Requesting summary from completion service")
    summarizer_client = config["configurable"]["summarizer_client"]
    raw_completion = await summarizer_client.complete(state["prompt"])
    logger.info(f"Completion received: {len(raw_completion)} characters")
    return {"stage": PipelineStage.AWAITING_COMPLETION, "raw_completion": raw_completion}

def parse_result(state: SummaryState) -> dict:
    """Step 5: Parse the completion into a structured or fallback summary"""
    logger.info("Step 5: Parsing completion result")
    result = parse_summary(state.get("raw_completion") or "")
    if isinstance(result, FallbackSummary):
        logger.info("Returning fallback summary (raw completion text)")
    return {"stage": PipelineStage.PARSING, "result": result}

def respond(state: SummaryState) -> dict:
    """Step 6: Mark the run as finished; the result is ready to send"""
    logger.info("Step 6: Summary ready")
    return {"stage": PipelineStage.RESPONDED}
