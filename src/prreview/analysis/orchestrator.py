"""Review orchestrator.

Coordinates one pull request review:

    fetch files -> limit/truncate -> build prompt -> model fallback chain
        -> extract -> normalize

Any failure that prevents a live analysis (fetch failure, missing
credentials, analysis disabled, every model failing) takes the single mock
branch instead. analyze() always returns a usable AnalysisResult.
"""

import logging

from prreview.analysis.mock import mock_analysis
from prreview.analysis.normalizer import parse_response
from prreview.config import AnalysisConfig, PrReviewConfig
from prreview.github.client import FetchError, PullRequestSource
from prreview.llm.client import AllModelsExhausted, ModelTransport
from prreview.llm.fallback import invoke_with_fallback
from prreview.llm.prompts import PromptContext, build_analysis_prompt, select_files
from prreview.models.llm_config import LLMConfig
from prreview.models.review import AnalysisResult
from prreview.utils.preflight import CredentialMissing, ensure_llm_credentials

logger = logging.getLogger(__name__)


class ReviewOrchestrator:
    """Produces an AnalysisResult for a pull request.

    Collaborators are injected so tests can substitute doubles:
    - source: anything with fetch_pr_files (GitHubClient)
    - transport: anything with invoke(model, prompt) (LLMClient)
    """

    def __init__(
        self,
        source: PullRequestSource,
        transport: ModelTransport,
        config: PrReviewConfig | None = None,
        check_credentials: bool = True,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            source: Pull request file source
            transport: Model transport
            config: Configuration (defaults if None)
            check_credentials: Verify provider credentials before invoking
        """
        self.source = source
        self.transport = transport
        self.config = config or PrReviewConfig()
        self.check_credentials = check_credentials

    @property
    def llm_config(self) -> LLMConfig:
        return self.config.llm

    @property
    def limits(self) -> AnalysisConfig:
        return self.config.analysis

    async def analyze(self, owner: str, repo: str, pr_number: int) -> AnalysisResult:
        """Review a pull request, degrading to mock data when needed.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            AnalysisResult (source "mock" when live analysis was not possible)
        """
        repository_id = f"{owner}/{repo}"
        logger.info("Analyzing %s#%d", repository_id, pr_number)

        try:
            files = await self.source.fetch_pr_files(owner, repo, pr_number)
        except FetchError as e:
            logger.warning("Could not fetch files for %s#%d: %s", repository_id, pr_number, e)
            return self._degrade(pr_number, [], repository_id, "file fetch failed")
        except Exception:
            logger.exception("Unexpected error fetching files for %s#%d", repository_id, pr_number)
            return self._degrade(pr_number, [], repository_id, "file fetch failed")

        selected = select_files(
            files,
            max_files=self.limits.max_files,
            max_file_chars=self.limits.max_file_chars,
        )
        context = PromptContext(owner=owner, repo=repo, pr_number=pr_number, files=selected)
        filenames = context.filenames
        logger.debug("Submitting %d of %d changed files", len(selected), len(files))

        if not self.llm_config.enabled:
            return self._degrade(pr_number, filenames, repository_id, "live analysis disabled")

        if self.check_credentials:
            try:
                ensure_llm_credentials(self.llm_config)
            except CredentialMissing as e:
                logger.warning("Model credentials missing: %s", e)
                return self._degrade(pr_number, filenames, repository_id, "credentials missing")

        prompt = build_analysis_prompt(context)

        try:
            outcome = await invoke_with_fallback(
                self.transport, prompt, self.llm_config.model_chain
            )
            return parse_response(outcome.text, filenames, model=outcome.model)
        except AllModelsExhausted as e:
            logger.error("Model analysis failed: %s", e)
            return self._degrade(pr_number, filenames, repository_id, "all models failed")
        except Exception:
            logger.exception("Unexpected error during model analysis of %s#%d", repository_id, pr_number)
            return self._degrade(pr_number, filenames, repository_id, "analysis error")

    def _degrade(
        self,
        pr_number: int,
        filenames: list[str],
        repository_id: str,
        reason: str,
    ) -> AnalysisResult:
        logger.warning("Falling back to mock data (%s)", reason)
        return mock_analysis(pr_number, filenames, repository_id=repository_id)
