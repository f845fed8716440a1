from dataclasses import dataclass
from functools import lru_cache

from commit_mentor.adapters.outbound.anthropic_review_adapter import AnthropicReviewAdapter
from commit_mentor.adapters.outbound.git_local_adapter import GitLocalAdapter
from commit_mentor.adapters.outbound.yaml_template_repository import YamlTemplateRepository
from commit_mentor.application.services.commit_aggregator import CommitAggregator
from commit_mentor.application.services.review_request_builder import ReviewRequestBuilder
from commit_mentor.application.services.template_renderer import TemplateRenderer
from commit_mentor.application.use_cases.load_commit_history import LoadCommitHistoryUseCase
from commit_mentor.application.use_cases.review_commit import ReviewCommitUseCase
from commit_mentor.configuration.settings import Settings, build_settings


@dataclass(frozen=True)
class Container:
    settings: Settings
    aggregator: CommitAggregator
    load_commit_history_use_case: LoadCommitHistoryUseCase
    review_commit_use_case: ReviewCommitUseCase


@lru_cache(maxsize=1)
def build_container(
    repo_path: str,
    api_key: str = "",
    max_commits: int | None = None,
) -> Container:
    settings = build_settings()

    commit_source = GitLocalAdapter(
        working_dir=repo_path,
        timeout_seconds=settings.git_timeout_seconds,
    )
    review_adapter = AnthropicReviewAdapter(
        api_key=api_key or settings.anthropic_api_key,
        base_url=settings.anthropic_base_url,
        api_version=settings.anthropic_version,
        model=settings.review_model,
        max_tokens=settings.review_max_tokens,
        timeout=float(settings.review_timeout_seconds),
    )

    # 템플릿 저장소 + 렌더러
    template_repo = YamlTemplateRepository(yaml_path=settings.template_yaml_path)
    template_renderer = TemplateRenderer(template_repo=template_repo)

    aggregator = CommitAggregator()

    load_commit_history_use_case = LoadCommitHistoryUseCase(
        commit_source=commit_source,
        aggregator=aggregator,
        max_commits=settings.max_commits if max_commits is None else max_commits,
    )

    review_commit_use_case = ReviewCommitUseCase(
        aggregator=aggregator,
        builder=ReviewRequestBuilder(
            renderer=template_renderer,
            review_port=review_adapter,
            max_changes_chars=settings.max_prompt_chars,
        ),
    )

    return Container(
        settings=settings,
        aggregator=aggregator,
        load_commit_history_use_case=load_commit_history_use_case,
        review_commit_use_case=review_commit_use_case,
    )


def clear_container() -> None:
    build_container.cache_clear()
