"""Locale sync module - keep target languages in step with the base language."""

import json
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..core.documents import LocaleStore
from ..core.history import GitHistory
from ..core.keys import (
    FlatKeyMap,
    ConflictPolicy,
    flatten,
    changed_keys,
    deleted_keys,
    missing_keys,
    merge_update_keys,
    remove_keys,
    apply_translations,
)
from ..utils.colors import Colors
from ..utils.logging import get_logger
from .translator import BatchTranslator

BACKUP_DIRNAME = '.locale_backups'


@dataclass
class BaseChanges:
    """Kaynak dil dosyasındaki değişiklikler (bir önceki revizyona göre)."""
    changed: FlatKeyMap = field(default_factory=dict)
    deleted: List[str] = field(default_factory=list)
    base_keys: FlatKeyMap = field(default_factory=dict)


@dataclass
class SyncResult:
    """Tek bir hedef dil dosyasının senkronizasyon sonucu."""
    language: str
    file_path: Optional[Path] = None
    removed_keys: List[str] = field(default_factory=list)
    missing_keys: List[str] = field(default_factory=list)
    requested_keys: List[str] = field(default_factory=list)
    translated_keys: List[str] = field(default_factory=list)
    failed_keys: List[str] = field(default_factory=list)
    conflict_keys: List[str] = field(default_factory=list)
    translation_failed: bool = False
    saved: bool = False
    backup_path: Optional[Path] = None

    @property
    def total_processed(self) -> int:
        return len(self.requested_keys)

    @property
    def success_count(self) -> int:
        return len(self.translated_keys)

    @property
    def failure_count(self) -> int:
        return len(self.failed_keys)

    @property
    def in_sync(self) -> bool:
        return not self.requested_keys and not self.removed_keys


@dataclass
class SyncSummary:
    """Tüm senkronizasyonun özeti."""
    source_lang: str
    source_file: str = ''
    changed_keys: List[str] = field(default_factory=list)
    deleted_keys: List[str] = field(default_factory=list)
    results: List[SyncResult] = field(default_factory=list)
    backup_paths: Dict[str, Path] = field(default_factory=dict)
    dry_run: bool = False

    @property
    def total_languages(self) -> int:
        return len(self.results)

    @property
    def total_requested(self) -> int:
        return sum(r.total_processed for r in self.results)

    @property
    def total_translations(self) -> int:
        return sum(r.success_count for r in self.results)

    @property
    def total_failures(self) -> int:
        return sum(r.failure_count for r in self.results)

    @property
    def has_changes(self) -> bool:
        return any(not r.in_sync for r in self.results)


class LocaleSync:
    """
    Locale senkronizasyon yöneticisi.

    Kaynak dil dosyasını git'teki bir önceki haliyle karşılaştırır ve
    diğer tüm dil dosyalarını günceller:
    - Silinen key'leri hedef dosyalardan kaldır
    - Değişen ve eksik key'leri çevir
    - Çevirileri mevcut yapıyı bozmadan yerleştir
    """

    def __init__(
        self,
        store: LocaleStore,
        history: GitHistory,
        translator: BatchTranslator,
        source_lang: str = 'en',
        source_file: str = 'en.json',
        backup: bool = False,
        conflict_policy: ConflictPolicy = ConflictPolicy.OVERWRITE
    ):
        """
        Sync yöneticisini başlat.

        Args:
            store: Locale dosyalarını okuyan/yazan store
            history: Önceki revizyonu sağlayan git erişimi
            translator: Toplu çeviri servisi
            source_lang: Kaynak dil kodu
            source_file: Kaynak dil dosyasının adı
            backup: Yazmadan önce dosyanın yedeğini al
            conflict_policy: Çeviri yolunda tip çakışması olursa ne yapılacağı
        """
        self.store = store
        self.history = history
        self.translator = translator
        self.source_lang = source_lang
        self.source_file = source_file
        self.backup = backup
        self.conflict_policy = conflict_policy

    @property
    def source_path(self) -> Path:
        return self.store.path_for(self.source_file)

    def detect_changes(self) -> BaseChanges:
        """
        Kaynak dosyadaki değişen ve silinen key'leri bul.

        Raises:
            LoadError: Kaynak dosya okunamazsa
            HistoryError: Önceki revizyon alınamazsa
        """
        log = get_logger()

        current = self.store.load(self.source_path)
        previous = self.history.previous_revision(self.source_path)

        changes = BaseChanges(
            changed=changed_keys(current, previous),
            deleted=deleted_keys(current, previous),
            base_keys=flatten(current),
        )

        if changes.changed:
            log.info(f"Detected changes in {self.source_file}: {len(changes.changed)} keys")
        else:
            log.info(f"No changes detected in {self.source_file}.")

        if changes.deleted:
            log.info(
                f"Detected {len(changes.deleted)} deleted keys in {self.source_file}: "
                f"{', '.join(changes.deleted)}"
            )

        return changes

    def sync_all(
        self,
        languages: Optional[Iterable[str]] = None,
        dry_run: bool = False
    ) -> SyncSummary:
        """
        Tüm dilleri senkronize et.

        Args:
            languages: Sadece bu dil kodlarını işle (varsayılan: hepsi)
            dry_run: True ise çeviri isteme ve dosyalara yazma

        Returns:
            SyncSummary

        Raises:
            LoadError: Kaynak ya da hedef dosya okunamazsa
            HistoryError: Önceki revizyon alınamazsa
        """
        changes = self.detect_changes()

        summary = SyncSummary(
            source_lang=self.source_lang,
            source_file=self.source_file,
            changed_keys=list(changes.changed),
            deleted_keys=list(changes.deleted),
            dry_run=dry_run,
        )

        targets = self.store.discover(exclude=self.source_file)
        if languages is not None:
            wanted = set(languages)
            targets = {lang: path for lang, path in targets.items() if lang in wanted}

        for lang, file_path in targets.items():
            result = self.sync_file(lang, file_path, changes, dry_run=dry_run)
            summary.results.append(result)

            if result.backup_path:
                summary.backup_paths[lang] = result.backup_path

        return summary

    def sync_file(
        self,
        lang: str,
        file_path: Path,
        changes: BaseChanges,
        dry_run: bool = False
    ) -> SyncResult:
        """
        Tek bir dil dosyasını senkronize et.

        Args:
            lang: Hedef dil kodu
            file_path: Hedef dosya yolu
            changes: Kaynak dosyadaki değişiklikler
            dry_run: True ise çeviri isteme ve dosyaya yazma

        Returns:
            SyncResult
        """
        log = get_logger()
        result = SyncResult(language=lang, file_path=file_path)

        document = self.store.load(file_path)
        target_keys = flatten(document)

        if changes.deleted:
            present = [key for key in changes.deleted if key in target_keys]
            log.info(f"Removing {len(changes.deleted)} deleted keys from {file_path.name}...")
            remove_keys(document, changes.deleted)
            result.removed_keys = present

        missing = missing_keys(changes.base_keys, target_keys)
        result.missing_keys = list(missing)

        if missing:
            log.info(f"Detected {len(missing)} missing keys in {file_path.name}")
        else:
            log.debug(f"No missing keys in {file_path.name}.")

        to_update = merge_update_keys(changes.changed, missing, changes.deleted)
        result.requested_keys = list(to_update)

        if not to_update and not changes.deleted:
            log.info(f"No keys to update for {file_path.name}. Already in sync.")
            return result

        if dry_run:
            if to_update:
                log.info(f"[DRY RUN] Would translate {len(to_update)} keys in {lang}")
            return result

        if to_update:
            log.info(f"Fetching translations for {len(to_update)} keys in {lang}...")
            translations = self.translator.fetch_translations(to_update, lang, self.source_lang)

            if translations is not None:
                log.info(f"Applying translations to {file_path.name}...")
                self._apply(document, translations, result)
            else:
                log.fail(f"Failed to fetch translations for {file_path.name}")
                result.translation_failed = True

            translated = translations or {}
            result.translated_keys = [key for key in to_update if key in translated]
            result.failed_keys = [key for key in to_update if key not in translated]

        if self.backup:
            result.backup_path = self._create_backup(file_path)

        self.store.save(file_path, document)
        result.saved = True
        log.success(f"Updated {file_path.name}")

        return result

    def _apply(self, document: Dict[str, Any], translations: FlatKeyMap, result: SyncResult):
        """Çevirileri dokümana uygula ve tip çakışmalarını kaydet."""
        conflicts = apply_translations(document, translations, self.conflict_policy)

        if conflicts:
            action = 'Overwrote' if self.conflict_policy is ConflictPolicy.OVERWRITE else 'Skipped'
            get_logger().warning(
                f"{action} {len(conflicts)} non-object values on translation paths: "
                f"{', '.join(conflicts)}"
            )
            result.conflict_keys = conflicts

    def _create_backup(self, file_path: Path) -> Optional[Path]:
        """Dosyanın yedeğini al."""
        if not file_path.exists():
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_dir = file_path.parent / BACKUP_DIRNAME
        backup_path = backup_dir / f"{file_path.stem}_backup_{timestamp}{file_path.suffix}"

        try:
            backup_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(file_path, backup_path)
        except OSError as e:
            get_logger().warning(f"Backup failed for {file_path.name}: {e}")
            return None

        return backup_path

    def print_summary(self, summary: SyncSummary, verbose: bool = False):
        """Senkronizasyon özetini yazdır."""
        mode = Colors.warning("[DRY RUN]") if summary.dry_run else ""
        print(f"\n{Colors.bold('🔄 LOCALE SYNC')} {mode}")
        print("=" * 60)
        print(f"Source: {summary.source_file} ({summary.source_lang})")
        print(f"Changed keys: {len(summary.changed_keys)}")
        print(f"Deleted keys: {len(summary.deleted_keys)}")
        print(f"Languages: {summary.total_languages}")
        print()

        if not summary.has_changes:
            print(f"{Colors.success('✅ All languages are in sync!')}")
            return

        print(f"{Colors.bold('📊 SUMMARY')}")
        print("-" * 40)
        print(f"  Keys requested: {summary.total_requested}")
        print(f"  Translated: {Colors.success(str(summary.total_translations))}")
        print(f"  Failed: {Colors.error(str(summary.total_failures))}")
        print()

        print(f"{Colors.bold('📋 DETAILS BY LANGUAGE')}")
        print("-" * 40)

        for result in summary.results:
            if result.in_sync:
                print(f"  {Colors.success('✓')} {result.language}: in sync")
                continue

            status = Colors.success("✓") if result.failure_count == 0 else Colors.warning("⚠")
            parts = [f"+{result.total_processed} keys"]
            if result.removed_keys:
                parts.append(f"-{len(result.removed_keys)} removed")
            if result.failure_count:
                parts.append(f"{result.failure_count} failed")
            print(f"  {status} {result.language}: {', '.join(parts)}")

            if verbose:
                for key in result.translated_keys[:10]:
                    print(f"      {Colors.success('+')} {key}")
                if len(result.translated_keys) > 10:
                    print(f"      ... and {len(result.translated_keys) - 10} more")

                for key in result.removed_keys:
                    print(f"      {Colors.dim('-')} {key}")

                for key in result.failed_keys:
                    print(f"      {Colors.error('!')} {key} (translation failed)")

        print()

        if summary.backup_paths and not summary.dry_run:
            print(f"{Colors.bold('💾 BACKUPS')}")
            print("-" * 40)
            for lang, path in summary.backup_paths.items():
                print(f"  {lang}: {path}")
            print()

        print("=" * 60)
        if summary.dry_run:
            print(f"{Colors.warning('No files were modified (dry run)')}")
        elif summary.total_failures:
            print(f"{Colors.warning('⚠️  Sync completed with translation failures')}")
        else:
            print(f"{Colors.success('✅ Sync completed!')}")

    def export_report(
        self,
        summary: SyncSummary,
        output_path: Path,
        format: str = "json"
    ):
        """Senkronizasyon raporunu export et."""
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if format == "json":
            data = {
                "timestamp": datetime.now().isoformat(),
                "source_lang": summary.source_lang,
                "source_file": summary.source_file,
                "dry_run": summary.dry_run,
                "changed_keys": summary.changed_keys,
                "deleted_keys": summary.deleted_keys,
                "summary": {
                    "total_languages": summary.total_languages,
                    "total_requested": summary.total_requested,
                    "total_translations": summary.total_translations,
                    "total_failures": summary.total_failures
                },
                "languages": [
                    {
                        "code": r.language,
                        "file": str(r.file_path) if r.file_path else None,
                        "removed": r.removed_keys,
                        "missing": r.missing_keys,
                        "requested": r.requested_keys,
                        "translated": r.translated_keys,
                        "failed": r.failed_keys,
                        "conflicts": r.conflict_keys,
                        "saved": r.saved
                    }
                    for r in summary.results
                ],
                "backups": {k: str(v) for k, v in summary.backup_paths.items()}
            }

            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)

        elif format == "md":
            lines = [
                "# Locale Sync Report",
                "",
                f"**Timestamp:** {datetime.now().isoformat()}",
                f"**Source:** {summary.source_file} ({summary.source_lang})",
                f"**Dry Run:** {summary.dry_run}",
                "",
                "## Summary",
                "",
                "| Metric | Value |",
                "|--------|-------|",
                f"| Changed Keys | {len(summary.changed_keys)} |",
                f"| Deleted Keys | {len(summary.deleted_keys)} |",
                f"| Languages | {summary.total_languages} |",
                f"| Keys Requested | {summary.total_requested} |",
                f"| Translations | {summary.total_translations} |",
                f"| Failures | {summary.total_failures} |",
                "",
            ]

            changed_results = [r for r in summary.results if not r.in_sync]
            if changed_results:
                lines.extend([
                    "## Language Details",
                    "",
                ])

                for result in changed_results:
                    lines.extend([
                        f"### {result.language}",
                        "",
                        f"- **Requested:** {result.total_processed}",
                        f"- **Translated:** {result.success_count}",
                        f"- **Failed:** {result.failure_count}",
                        f"- **Removed:** {len(result.removed_keys)}",
                        "",
                    ])

                    if result.requested_keys:
                        lines.append("**Keys:**")
                        for key in result.requested_keys[:20]:
                            status = "✅" if key in result.translated_keys else "❌"
                            lines.append(f"- {status} `{key}`")
                        if len(result.requested_keys) > 20:
                            lines.append(f"- ... and {len(result.requested_keys) - 20} more")
                        lines.append("")

            with open(output_path, 'w', encoding='utf-8') as f:
                f.write('\n'.join(lines))

        else:
            raise ValueError(f"Unknown report format: {format}")

        print(f"{Colors.success('✓')} Report exported to: {output_path}")
