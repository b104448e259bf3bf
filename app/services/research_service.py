"""
Research Service - Multi-step web research on top of Gemini search grounding.

RESPONSIBILITY:
Answers a question more thoroughly than a single grounded call by
breaking it into sub-queries, searching each one, and synthesizing
the findings into one cited answer.

FLOW:
1. Plan: ask the model for a short list of search queries (JSON)
2. Search: run each query with the Google Search tool, collect
   findings and source links
3. Synthesize: write the final answer from the findings
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from app.models.schemas import ResearchResult
from app.services.gemini_client import GeminiClient

logger = logging.getLogger(__name__)


ProgressCallback = Callable[[str], None]


PLANNER_PROMPT = """You are a research planner. Break the research question below
into at most {max_queries} focused web search queries that together cover it.

Output JSON only, with this structure:
{{"queries": ["first query", "second query"]}}

Research question: {query}
"""

SEARCH_SYSTEM_PROMPT = """You are a meticulous researcher. Use Google Search to
answer the query with concrete, current facts. Be concise and note dates and
figures where they matter."""

SYNTHESIS_PROMPT = """Research question: {query}

Findings:
{findings}

Write a thorough, well-structured answer to the research question using only
these findings. Use headers and bullet points where they help. If the findings
disagree, say so.
"""


class ResearchService:
    """Runs plan -> search -> synthesize research over Gemini."""

    def __init__(self, gemini: GeminiClient, model: str, max_queries: int = 3):
        self.gemini = gemini
        self.model = model
        self.max_queries = max_queries

    async def deep_research(
        self,
        query: str,
        on_progress: Optional[ProgressCallback] = None
    ) -> ResearchResult:
        """
        Research a question.

        Args:
            query: The research question
            on_progress: Called with short human-readable status messages

        Returns:
            ResearchResult with the answer and a de-duplicated source list
        """
        report = on_progress or (lambda message: None)

        report("Planning research...")
        queries = await self._plan(query)
        logger.info(f"Research plan for '{query[:50]}': {len(queries)} queries")

        findings: List[str] = []
        sources: List[str] = []
        for sub_query in queries:
            report(f"Searching: {sub_query}")
            result = await self.gemini.generate(
                model=self.model,
                contents=sub_query,
                system_instruction=SEARCH_SYSTEM_PROMPT,
                google_search=True,
            )
            findings.append(f"### {sub_query}\n{result.text.strip()}")
            for source in self._format_sources(result.grounding_chunks):
                if source not in sources:
                    sources.append(source)

        report("Synthesizing findings...")
        answer = await self.gemini.generate(
            model=self.model,
            contents=SYNTHESIS_PROMPT.format(query=query, findings="\n\n".join(findings)),
        )

        return ResearchResult(answer=answer.text.strip(), sources=sources)

    async def _plan(self, query: str) -> List[str]:
        """Ask the model for sub-queries; fall back to the query itself."""
        response = await self.gemini.generate(
            model=self.model,
            contents=PLANNER_PROMPT.format(query=query, max_queries=self.max_queries),
            response_mime_type="application/json",
        )
        return self._parse_queries(response.text, query)

    def _parse_queries(self, response: str, query: str) -> List[str]:
        """
        Parse the planner output.

        Falls back to the original query if parsing fails.
        """
        try:
            start = response.find('{')
            end = response.rfind('}') + 1
            if start != -1 and end > start:
                data = json.loads(response[start:end])
                planned = data.get("queries") if isinstance(data, dict) else None
                if isinstance(planned, list):
                    queries = [
                        q.strip() for q in planned
                        if isinstance(q, str) and q.strip()
                    ]
                    if queries:
                        return queries[:self.max_queries]
                logger.warning("Research plan has no usable queries, using the query as-is")
        except json.JSONDecodeError:
            logger.warning("Failed to parse research plan, using the query as-is")

        return [query]

    @staticmethod
    def _format_sources(grounding_chunks: List[Dict[str, Any]]) -> List[str]:
        """Turn grounding chunks into markdown links."""
        sources = []
        for chunk in grounding_chunks:
            web = chunk.get("web") or {}
            uri = web.get("uri")
            if not uri:
                continue
            title = web.get("title") or uri
            sources.append(f"- [{title}]({uri})")
        return sources
