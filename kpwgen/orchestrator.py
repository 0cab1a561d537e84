"""Turn a validated request into an ordered batch of derived passwords."""

import logging
from collections.abc import Callable

from kpwgen.derive import gen_password, normalize_platform
from kpwgen.errors import GenerationFailure
from kpwgen.history import HistoryStore
from kpwgen.models import AdvancedParams, GenerationRequest, GenerationResult
from kpwgen.validation import validate

logger = logging.getLogger(__name__)

GenerateFn = Callable[..., str]
NormalizeFn = Callable[[str], str]


def derive_batch(
    request: GenerationRequest,
    *,
    generate: GenerateFn = gen_password,
    normalize: NormalizeFn = normalize_platform,
) -> list[GenerationResult]:
    """Derive one result per platform token, in input order.

    Any exception from the primitive aborts the whole batch as a
    :class:`GenerationFailure`; no partial list is ever returned.
    """
    params = request.params
    results: list[GenerationResult] = []
    try:
        for i, token in enumerate(request.platforms):
            platform = token.strip() if params.raw_mode else normalize(token)
            account = request.accounts[i] if request.accounts else None
            password = generate(
                secret=request.secret,
                platform=platform,
                account=account,
                version=params.version,
                target_length=params.length,
                prefix=params.prefix,
                suffix=params.suffix,
                normalize=not params.raw_mode,
            )
            results.append(GenerationResult(platform, account, password))
    except Exception as exc:
        # Exception text may echo inputs; log the type only.
        logger.warning("Derivation failed (%s)", type(exc).__name__)
        raise GenerationFailure() from exc
    return results


class GenerationOrchestrator:
    """Validates submissions, derives batches and records them in history."""

    def __init__(
        self,
        history: HistoryStore | None = None,
        *,
        generate: GenerateFn = gen_password,
        normalize: NormalizeFn = normalize_platform,
    ):
        self.history = history if history is not None else HistoryStore()
        self._generate = generate
        self._normalize = normalize

    def generate(self, request: GenerationRequest) -> list[GenerationResult]:
        """Derive the batch for *request* and append it to history as one unit."""
        results = derive_batch(request, generate=self._generate, normalize=self._normalize)
        self.history.append(results)
        logger.info("Generated %d password(s)", len(results))
        return results

    def submit(
        self,
        platform_text: str,
        account_text: str,
        secret: str,
        params: AdvancedParams | None = None,
    ) -> list[GenerationResult]:
        """Validate raw input fields, then :meth:`generate`."""
        return self.generate(validate(platform_text, account_text, secret, params))
