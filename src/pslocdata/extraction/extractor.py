"""Static localization-data extractor.

Turns a PowerShell module path and an optional locale into the message
tables its Import-LocalizedData calls would load:

    module path -> ScriptTree -> call sites -> ArgumentRecord per call
    -> <module dir>/<locale>/<FileName> -> {binding: {key: value}}

Failure isolation:
    - Missing module file: warning, no data (never raises)
    - Fatal syntax error: ScriptParseError propagates
    - Malformed call: that call is skipped
    - Missing or invalid data file: that binding is skipped

Thread Safety:
    LocalizationExtractor holds only immutable configuration; one
    instance can serve concurrent extractions.

Python 3.13+.
"""

import logging
from dataclasses import replace
from pathlib import Path
from types import MappingProxyType

from pslocdata.config import ExtractorConfig
from pslocdata.constants import (
    PARAM_BASE_DIRECTORY,
    PARAM_BINDING_VARIABLE,
    PARAM_FILE_NAME,
    PARAM_UI_CULTURE,
)
from pslocdata.datafile import LocaleDataLoader, PathLocaleDataLoader, load_message_table
from pslocdata.diagnostics import (
    Diagnostic,
    ErrorTemplate,
    LocaleDataFormatError,
    MalformedCallError,
    MissingLocaleDataError,
    ScriptNotFoundError,
    ScriptParseError,
)
from pslocdata.enums import CallStatus, ExtractionStatus
from pslocdata.locale_utils import is_known_locale
from pslocdata.syntax import PowerShellParser, ScriptTree

from .arguments import resolve_arguments
from .call_sites import CallSite, find_call_sites
from .elements import to_source_span
from .results import CallSiteResult, ExtractionResult

__all__ = ["LocalizationExtractor", "extract"]

logger = logging.getLogger(__name__)


class LocalizationExtractor:
    """Extract message tables loaded by Import-LocalizedData calls.

    Example:
        >>> extractor = LocalizationExtractor()
        >>> extractor.extract("MyModule/MyModule.psm1")
        {'Strings': {'Greeting': 'Hello'}}
        >>> extractor.extract("MyModule/MyModule.psm1", "fr-FR")
        {'Strings': {'Greeting': 'Bonjour'}}

    Attributes:
        config: Immutable extractor configuration
    """

    __slots__ = ("_config", "_parser")

    def __init__(self, config: ExtractorConfig | None = None) -> None:
        """Initialize extractor.

        Args:
            config: Extractor configuration (default: ExtractorConfig())
        """
        self._config = config if config is not None else ExtractorConfig()
        self._parser = PowerShellParser(
            max_source_size=self._config.max_source_size,
            max_nesting_depth=self._config.max_nesting_depth,
        )

    @property
    def config(self) -> ExtractorConfig:
        """Extractor configuration."""
        return self._config

    def extract(
        self, file_path: str | Path, locale: str | None = None
    ) -> dict[str, dict[str, str]]:
        """Extract {binding: {key: value}} for a module.

        Args:
            file_path: Module path (relative paths resolve against the
                working directory)
            locale: Locale directory to read; None or "" selects the
                configured default (en-US)

        Returns:
            Binding name to message table. Empty when the file is missing
            or contains no call sites.

        Raises:
            ScriptParseError: If the module cannot be parsed
        """
        return self.analyze(file_path, locale).to_dict()

    def analyze(self, file_path: str | Path, locale: str | None = None) -> ExtractionResult:
        """Run the extraction and return per-call results and diagnostics.

        Raises:
            ScriptParseError: If the module cannot be parsed
        """
        effective_locale = self._effective_locale(locale)
        try:
            module_path, source = self._read_module(file_path)
        except ScriptNotFoundError as exc:
            diagnostic = exc.diagnostic or ErrorTemplate.file_not_found(str(file_path))
            logger.warning("%s", diagnostic.message)
            return ExtractionResult(
                file_path=str(file_path),
                locale=effective_locale,
                status=ExtractionStatus.NOT_FOUND,
                bindings=MappingProxyType({}),
                diagnostics=(diagnostic,),
            )
        return self._run(source, module_path, effective_locale)

    def extract_source(
        self,
        source: str,
        module_path: str | Path,
        locale: str | None = None,
    ) -> ExtractionResult:
        """Run the extraction on in-memory module text.

        Args:
            source: Module text
            module_path: Path the text belongs to; its directory is the
                base directory for locale data
            locale: Locale directory to read (default: configured default)

        Raises:
            ScriptParseError: If the text cannot be parsed
        """
        return self._run(source, Path(module_path).resolve(), self._effective_locale(locale))

    def _effective_locale(self, locale: str | None) -> str:
        return locale if locale else self._config.default_locale

    def _read_module(self, file_path: str | Path) -> tuple[Path, str]:
        """Resolve and read the module.

        Raises:
            ScriptNotFoundError: If the path is not an existing file
            ScriptParseError: If the file is not valid text in the configured
                encoding
        """
        path = Path(file_path).resolve()
        if not path.is_file():
            raise ScriptNotFoundError(ErrorTemplate.file_not_found(str(file_path)))
        try:
            return path, path.read_text(encoding=self._config.encoding)
        except UnicodeDecodeError as exc:
            diagnostic = ErrorTemplate.parse_error(f"Cannot decode '{file_path}': {exc.reason}")
            raise ScriptParseError(replace(diagnostic, file_path=str(path))) from exc

    def _run(self, source: str, module_path: Path, locale: str) -> ExtractionResult:
        file_path = str(module_path)
        diagnostics: list[Diagnostic] = []

        if self._config.check_locale and not is_known_locale(locale):
            logger.warning("Locale %r is not known to Babel; looking it up anyway", locale)
            diagnostics.append(ErrorTemplate.unknown_locale(locale))

        tree = self._parser.parse(source)
        for junk in tree.junk:
            diagnostic = ErrorTemplate.parse_junk(junk.content, to_source_span(junk))
            diagnostics.append(replace(diagnostic, file_path=file_path))
            logger.warning("Recovered from syntax error in %s: %s", file_path, diagnostic.message)

        sites = find_call_sites(tree, self._config.command_name)
        if not sites:
            diagnostic = ErrorTemplate.no_call_sites(file_path, self._config.command_name)
            logger.warning("%s", diagnostic.message)
            diagnostics.append(diagnostic)
            return ExtractionResult(
                file_path=file_path,
                locale=locale,
                status=ExtractionStatus.NO_CALL_SITES,
                bindings=MappingProxyType({}),
                diagnostics=tuple(diagnostics),
            )

        loader = PathLocaleDataLoader(str(module_path.parent), encoding=self._config.encoding)
        bindings: dict[str, dict[str, str]] = {}
        call_results: list[CallSiteResult] = []
        for site in sites:
            result, table, extra = self._extract_call(tree, site, module_path, locale, loader)
            call_results.append(result)
            diagnostics.extend(extra)
            if result.diagnostic is not None:
                diagnostics.append(result.diagnostic)
            if table is not None and result.binding is not None:
                if result.binding in bindings:
                    logger.debug("Binding %r redefined on line %d", result.binding, result.line)
                bindings[result.binding] = table

        status = (
            ExtractionStatus.SUCCESS
            if all(r.is_loaded for r in call_results)
            else ExtractionStatus.PARTIAL
        )
        logger.info(
            "Extracted %d binding(s) from %d call site(s) in %s",
            len(bindings),
            len(call_results),
            file_path,
        )
        return ExtractionResult(
            file_path=file_path,
            locale=locale,
            status=status,
            bindings=MappingProxyType(bindings),
            call_sites=tuple(call_results),
            diagnostics=tuple(diagnostics),
        )

    def _extract_call(
        self,
        tree: ScriptTree,
        site: CallSite,
        module_path: Path,
        locale: str,
        loader: LocaleDataLoader,
    ) -> tuple[CallSiteResult, dict[str, str] | None, tuple[Diagnostic, ...]]:
        """Resolve one call and load its table.

        Returns:
            (call result, loaded table or None, additional warnings)
        """
        file_path = str(module_path)
        try:
            record = resolve_arguments(tree, site.command)
        except MalformedCallError as exc:
            diagnostic = exc.diagnostic or ErrorTemplate.malformed_call(exc.element_kind)
            diagnostic = replace(diagnostic, file_path=file_path)
            logger.warning("Skipping call on line %d: %s", site.line, diagnostic.message)
            return CallSiteResult(site.line, CallStatus.MALFORMED, diagnostic=diagnostic), None, ()

        span = to_source_span(site.command)
        warnings = tuple(
            ErrorTemplate.unresolved_splat(name, span, file_path)
            for name in record.unresolved_splats
        )

        binding = record.get(PARAM_BINDING_VARIABLE) or site.assigned_to
        record = record.without(PARAM_BINDING_VARIABLE)
        if not binding:
            diagnostic = ErrorTemplate.missing_binding_variable(span, file_path)
            logger.warning("Discarding call on line %d: %s", site.line, diagnostic.message)
            result = CallSiteResult(
                site.line, CallStatus.NO_BINDING, arguments=record, diagnostic=diagnostic
            )
            return result, None, warnings

        record = record.with_values(
            {PARAM_UI_CULTURE: locale, PARAM_BASE_DIRECTORY: str(module_path.parent)}
        )
        file_name = record.get(PARAM_FILE_NAME) or module_path.stem
        if not Path(file_name).suffix:
            file_name += self._config.data_file_extension
        data_path = loader.describe_path(locale, file_name)

        try:
            table = self._load_table(loader, binding, locale, file_name, data_path)
        except MissingLocaleDataError as exc:
            diagnostic = exc.diagnostic or ErrorTemplate.missing_locale_data(
                binding, locale, data_path
            )
            logger.warning("%s", diagnostic.message)
            result = CallSiteResult(
                site.line,
                CallStatus.MISSING_DATA,
                binding=binding,
                arguments=record,
                data_path=data_path,
                diagnostic=diagnostic,
            )
            return result, None, warnings
        except LocaleDataFormatError as exc:
            diagnostic = exc.diagnostic or ErrorTemplate.invalid_locale_data(data_path, str(exc))
            diagnostic = replace(diagnostic, binding=binding)
            logger.warning("%s", diagnostic.message)
            result = CallSiteResult(
                site.line,
                CallStatus.INVALID_DATA,
                binding=binding,
                arguments=record,
                data_path=data_path,
                diagnostic=diagnostic,
            )
            return result, None, warnings

        logger.debug("Loaded %d message(s) for binding %r", len(table), binding)
        result = CallSiteResult(
            site.line, CallStatus.LOADED, binding=binding, arguments=record, data_path=data_path
        )
        return result, table, warnings

    def _load_table(
        self,
        loader: LocaleDataLoader,
        binding: str,
        locale: str,
        file_name: str,
        data_path: str,
    ) -> dict[str, str]:
        """Load and read one data file.

        Raises:
            MissingLocaleDataError: If the file is absent or the path is unsafe
            LocaleDataFormatError: If the file is unreadable or not a message table
        """
        try:
            text = loader.load(locale, file_name)
        except FileNotFoundError as exc:
            raise MissingLocaleDataError(
                ErrorTemplate.missing_locale_data(binding, locale, data_path),
                locale=locale,
                data_path=data_path,
            ) from exc
        except UnicodeDecodeError as exc:
            raise LocaleDataFormatError(
                ErrorTemplate.invalid_locale_data(data_path, f"cannot decode file: {exc.reason}")
            ) from exc
        except ValueError as exc:
            logger.debug("Rejected unsafe data path: %s", exc)
            raise MissingLocaleDataError(
                ErrorTemplate.missing_locale_data(binding, locale, data_path),
                locale=locale,
                data_path=data_path,
            ) from exc
        except OSError as exc:
            raise LocaleDataFormatError(
                ErrorTemplate.invalid_locale_data(data_path, f"cannot read file: {exc}")
            ) from exc

        return load_message_table(
            text,
            data_path=data_path,
            max_source_size=self._config.max_source_size,
            max_nesting_depth=self._config.max_nesting_depth,
        )


def extract(
    file_path: str | Path,
    locale: str | None = None,
    *,
    config: ExtractorConfig | None = None,
) -> dict[str, dict[str, str]]:
    """Extract {binding: {key: value}} for a module.

    Convenience function for LocalizationExtractor(config).extract().

    Example:
        >>> from pslocdata import extract
        >>> extract("MyModule/MyModule.psm1", "de-DE")
        {'Strings': {'Greeting': 'Hallo'}}
    """
    return LocalizationExtractor(config).extract(file_path, locale)
