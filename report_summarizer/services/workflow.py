import logging
from typing import Any, Dict

from langgraph.graph import StateGraph, END
from pydantic import BaseModel

from report_summarizer.services.documents import UploadedDocument
from report_summarizer.services.errors import SummaryPipelineError
from report_summarizer.services.nodes import (
    extract_text,
    validate_text,
    build_prompt,
    request_completion,
    parse_result,
    respond,
)
from report_summarizer.services.processors import TextExtractor, SummarizerClient
from report_summarizer.services.states import SummaryState, PipelineStage

logger = logging.getLogger(__name__)


def build_summary_graph():
    """Build and compile the LangGraph workflow for document summarization"""
    workflow = StateGraph(SummaryState)

    # Add nodes (the processing steps)
    workflow.add_node("extract_text", extract_text)
    workflow.add_node("validate_text", validate_text)
    workflow.add_node("build_prompt", build_prompt)
    workflow.add_node("request_completion", request_completion)
    workflow.add_node("parse_result", parse_result)
    workflow.add_node("respond", respond)

    # Strictly linear: a node that raises ends the run
    workflow.set_entry_point("extract_text")
    workflow.add_edge("extract_text", "validate_text")
    workflow.add_edge("validate_text", "build_prompt")
    workflow.add_edge("build_prompt", "request_completion")
    workflow.add_edge("request_completion", "parse_result")
    workflow.add_edge("parse_result", "respond")
    workflow.add_edge("respond", END)

    return workflow.compile()

# Create the compiled graph instance
summary_graph = build_summary_graph()


class PipelineOutcome(BaseModel):
    """HTTP status and JSON body produced by one pipeline run."""
    status_code: int
    body: Dict[str, Any]

    @classmethod
    def failure(cls, status_code: int, message: str) -> "PipelineOutcome":
        return cls(status_code=status_code, body={"error": message})

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class SummaryPipeline:
    """
    Runs one uploaded document through the summary graph.

    This is the error boundary of a request: every failure comes back as a
    PipelineOutcome carrying ``{"error": ...}``, and the document's temporary
    file is released on every path.
    """

    def __init__(self, text_extractor: TextExtractor, summarizer_client: SummarizerClient, graph=None):
        self.text_extractor = text_extractor
        self.summarizer_client = summarizer_client
        self.graph = graph or summary_graph

    async def run(self, document: UploadedDocument) -> PipelineOutcome:
        initial_state: SummaryState = {
            "document": document,
            "stage": PipelineStage.RECEIVED,
            "extracted_text": "",
            "prompt": None,
            "raw_completion": None,
            "result": None,
        }
        config = {
            "configurable": {
                "text_extractor": self.text_extractor,
                "summarizer_client": self.summarizer_client,
            }
        }

        try:
            final_state = await self.graph.ainvoke(initial_state, config=config)
        except SummaryPipelineError as e:
            logger.warning(f"Summarization of {document} stopped: {e.message}")
            return PipelineOutcome.failure(e.status_code, e.message)
        except Exception as e:
            logger.error(f"Unexpected error summarizing {document}: {e}", exc_info=True)
            return PipelineOutcome.failure(500, "Internal server error")
        finally:
            document.release()

        result = final_state["result"]
        logger.info(f"Summarization completed for {document}: {type(result).__name__} (stage: {final_state['stage'].value})")
        return PipelineOutcome(status_code=200, body={"result": result.to_payload()})
