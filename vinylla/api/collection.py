"""
Collection Store - The user's ordered record collection.

Handles:
- Loading the collection (fails soft to empty on corruption)
- Atomic saves with recovery of an interrupted save
- Append / remove of records
"""
import os
import json
import logging
from pathlib import Path
from typing import Optional, List

from ..models import Record
from ..errors import CorruptState, PersistError

logger = logging.getLogger(__name__)


class CollectionStore:
    """
    Owns the in-memory collection and its JSON file.

    Insertion order is display order. Nothing else holds a mutable copy.
    """

    def __init__(self, collection_path: Path):
        self.collection_path = collection_path
        self._records: List[Record] = []
        self.load_error: Optional[CorruptState] = None

    @property
    def _temp_path(self) -> Path:
        return self.collection_path.with_suffix('.json.tmp')

    # ============================================
    # LOADING & SAVING
    # ============================================

    def load(self) -> List[Record]:
        """Load records from disk. Any failure leaves an empty collection and sets load_error."""
        self.load_error = None
        self._records = []

        path = self.collection_path
        if not path.exists() and self._temp_path.exists():
            logger.warning(f'Recovering collection from interrupted save: {self._temp_path}')
            path = self._temp_path

        if not path.exists():
            logger.info(f'No collection at {self.collection_path}, starting empty')
            return self._records

        try:
            logger.info(f'Loading collection from {path}')
            data = json.loads(path.read_text(encoding='utf-8'))
            if not isinstance(data, dict) or not isinstance(data.get('records'), list):
                raise ValueError('expected an object with a "records" list')
        except json.JSONDecodeError as e:
            logger.error(f'Invalid JSON in collection file: {e}', exc_info=True)
            self.load_error = CorruptState(f'Collection file is corrupt, starting empty ({e.msg})')
            self._quarantine(path)
            return self._records
        except (IOError, OSError) as e:
            logger.error(f'Cannot read collection file: {e}', exc_info=True)
            self.load_error = CorruptState('Cannot read collection file, starting empty')
            return self._records
        except ValueError as e:
            logger.error(f'Unexpected collection format: {e}')
            self.load_error = CorruptState('Collection file is corrupt, starting empty')
            self._quarantine(path)
            return self._records

        skipped = 0
        for entry in data['records']:
            try:
                self._records.append(Record.from_dict(entry))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                skipped += 1
                logger.warning(f'Skipping malformed record {entry!r:.80}: {e}')

        if skipped:
            self.load_error = CorruptState(f'Skipped {skipped} unreadable record(s)')
        logger.info(f'Loaded {len(self._records)} records')
        return self._records

    def _quarantine(self, path: Path):
        """Move an unreadable file aside so the next save cannot overwrite it."""
        backup = self.collection_path.with_suffix('.json.corrupt')
        try:
            os.replace(path, backup)
            logger.warning(f'Moved unreadable collection to {backup}')
        except OSError as e:
            logger.error(f'Could not move aside {path}: {e}')

    def save(self, records: Optional[List[Record]] = None):
        """
        Write the collection to disk atomically.

        Raises PersistError if the file cannot be written.
        """
        if records is not None:
            self._records = list(records)

        payload = {'records': [record.to_dict() for record in self._records]}
        try:
            self.collection_path.parent.mkdir(parents=True, exist_ok=True)
            self._temp_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding='utf-8')
            os.replace(self._temp_path, self.collection_path)
        except (IOError, OSError) as e:
            logger.error(f'Failed to save collection: {e}', exc_info=True)
            raise PersistError(f'Could not save collection: {e}') from e
        logger.debug(f'Saved {len(self._records)} records to {self.collection_path}')

    # ============================================
    # MUTATION
    # ============================================

    @property
    def records(self) -> List[Record]:
        """Read-only view of the records (a copy)."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, index: int) -> Record:
        return self._records[index]

    def contains(self, release_id: Optional[int]) -> bool:
        """Check if a record with this release id is already collected."""
        if release_id is None:
            return False
        return any(record.release_id == release_id for record in self._records)

    def append(self, record: Record):
        self._records.append(record)
        logger.info(f'Added {record.label} (release {record.release_id})')

    def remove_at(self, index: int) -> Record:
        """Remove and return the record at index. Raises IndexError when out of range."""
        if not 0 <= index < len(self._records):
            raise IndexError(f'No record at index {index} (collection has {len(self._records)})')
        record = self._records.pop(index)
        logger.info(f'Removed {record.label}')
        return record
