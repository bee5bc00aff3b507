"""Hook and retry system for API clients.

Every remote call of an API client runs inside ``invoke_with_hooks``:

- pre_hooks: executed once before the first attempt (metrics, request logs)
- retry_hooks: executed before every retry attempt, receive the attempt number
- error_hooks: executed once after the final failed attempt
- post_hooks: always executed once at the end (finally semantics)

Retries are delegated to stamina and configured via ``RetryConfig``.
"""

import functools
import inspect
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

import stamina


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration passed to ``stamina.retry_context``.

    Defaults mirror the stamina defaults.

    Attributes:
        on: Exception type(s) that trigger a retry
        attempts: Maximum number of attempts (None = bounded by timeout only)
        timeout: Overall deadline in seconds (None = bounded by attempts only)
    """

    on: type[Exception] | tuple[type[Exception], ...]
    attempts: int | None = 10
    timeout: float | None = 45.0
    wait_initial: float = 0.1
    wait_max: float = 5.0
    wait_jitter: float = 1.0
    wait_exp_base: float = 2


NO_RETRY_CONFIG = RetryConfig(on=Exception, attempts=1)


@dataclass(frozen=True)
class Hooks:
    """Collection of hooks and the retry configuration for an API client."""

    pre_hooks: list[Callable[..., None]] = field(default_factory=list)
    post_hooks: list[Callable[..., None]] = field(default_factory=list)
    error_hooks: list[Callable[..., None]] = field(default_factory=list)
    retry_hooks: list[Callable[[int], None]] = field(default_factory=list)
    retry_config: RetryConfig | None = None

    def merge(self, other: "Hooks | None") -> "Hooks":
        """Return new Hooks with ``other`` appended after our hooks.

        The retry config of ``other`` wins if set.
        """
        if other is None:
            return self
        return replace(
            self,
            pre_hooks=[*self.pre_hooks, *other.pre_hooks],
            post_hooks=[*self.post_hooks, *other.post_hooks],
            error_hooks=[*self.error_hooks, *other.error_hooks],
            retry_hooks=[*self.retry_hooks, *other.retry_hooks],
            retry_config=other.retry_config or self.retry_config,
        )


def _build_context(
    context_factory: Callable[..., Any] | None, instance: Any
) -> tuple[bool, Any]:
    if context_factory is None:
        return False, None
    if not inspect.signature(context_factory).parameters or instance is None:
        return True, context_factory()
    return True, context_factory(instance)


def _run(
    hooks: list[Callable[..., None]],
    has_context: bool,  # noqa: FBT001
    context: Any,
) -> None:
    for hook in hooks:
        if has_context:
            hook(context)
        else:
            hook()


def invoke_with_hooks(
    context_factory: Callable[..., Any] | None = None,
    *,
    hooks: Hooks | None = None,
    retry_config: RetryConfig | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorate a method (or function) to run it with hooks and retries.

    Args:
        context_factory: Builds the context passed to pre/post/error hooks.
            Receives the instance (``self``) if it declares a parameter.
        hooks: Hooks for standalone functions. Methods use ``self._hooks``.
        retry_config: Overrides the retry configuration of the hooks.

    Example:
        >>> class Api:
        ...     _hooks = Hooks()
        ...
        ...     @invoke_with_hooks(lambda self: {"method": "get"})
        ...     def get(self) -> str:
        ...         return "value"
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            instance = None
            active_hooks = hooks
            if active_hooks is None:
                if not args or not hasattr(args[0], "_hooks"):
                    raise ValueError(
                        f"{func.__qualname__} needs either hooks=... or an instance with _hooks"
                    )
                instance = args[0]
                active_hooks = instance._hooks
            config = retry_config or active_hooks.retry_config or NO_RETRY_CONFIG
            has_context, context = _build_context(context_factory, instance)

            _run(active_hooks.pre_hooks, has_context, context)
            try:
                for attempt in stamina.retry_context(
                    on=config.on,
                    attempts=config.attempts,
                    timeout=config.timeout,
                    wait_initial=config.wait_initial,
                    wait_max=config.wait_max,
                    wait_jitter=config.wait_jitter,
                    wait_exp_base=config.wait_exp_base,
                ):
                    with attempt:
                        if attempt.num > 1:
                            for retry_hook in active_hooks.retry_hooks:
                                retry_hook(attempt.num)
                        return func(*args, **kwargs)
            except Exception:
                _run(active_hooks.error_hooks, has_context, context)
                raise
            finally:
                _run(active_hooks.post_hooks, has_context, context)
            # stamina always either returns through the attempt or raises
            raise AssertionError("unreachable")

        return wrapper

    return decorator


def with_hooks[C](hooks: Hooks) -> Callable[[type[C]], type[C]]:
    """Class decorator that installs built-in hooks on every instance.

    The decorated ``__init__`` may accept a ``hooks`` argument; those user
    hooks run after the built-in ones.
    """

    def decorator(cls: type[C]) -> type[C]:
        original_init = cls.__init__  # type: ignore[misc]
        signature = inspect.signature(original_init)

        @functools.wraps(original_init)
        def __init__(self: Any, *args: Any, **kwargs: Any) -> None:  # noqa: N807
            original_init(self, *args, **kwargs)
            bound = signature.bind(self, *args, **kwargs)
            user_hooks = bound.arguments.get("hooks")
            self._hooks = hooks.merge(user_hooks)

        cls.__init__ = __init__  # type: ignore[misc]
        return cls

    return decorator
