"""Interactive text menu for Rolodex."""

from .config import RolodexConfig, apply_env_overrides, load_config
from .contacts import (
    Contact,
    ContactNotFoundError,
    ContactStore,
    JsonFileBackend,
    PersistenceError,
    ValidationError,
)
from .logging import JSONLLogger

BANNER = """
╔══════════════════════════════════════════╗
║              📇 Rolodex                  ║
║        Personal contact book             ║
╚══════════════════════════════════════════╝
"""

MENU = """
  1) Add contact
  2) List contacts
  3) List contacts by name
  4) Search
  5) Show contact
  6) Update contact
  7) Delete contact
  8) Save now
  0) Exit
"""

EXIT_CHOICES = ("0", "q", "quit", "exit")


def _config_from_env() -> RolodexConfig:
    """Load configuration from the config file and environment variables."""
    return apply_env_overrides(load_config())


def build_store(config: RolodexConfig) -> ContactStore:
    """Create a ContactStore wired to the configured file and event log."""
    assert config.contacts_path is not None
    backend = JsonFileBackend(config.contacts_path, backup_suffix=config.backup_suffix)
    event_log = JSONLLogger(log_dir=config.log_dir) if config.event_log else None
    return ContactStore(
        backend=backend,
        email_required=config.email_required,
        event_log=event_log,
    )


def format_contact(contact: Contact) -> str:
    """Format a contact as one table row."""
    return f"{contact.id}  {contact.name:<24} {contact.phone:<18} {contact.email or '-'}"


class CLI:
    """Menu-driven command-line interface over a ContactStore."""

    def __init__(
        self,
        store: ContactStore | None = None,
        config: RolodexConfig | None = None,
    ) -> None:
        self.config = config or _config_from_env()
        self.store = store if store is not None else build_store(self.config)

    def _prompt(self, label: str) -> str:
        return input(f"{label}: ").strip()

    def _print_contacts(self, contacts: tuple[Contact, ...]) -> None:
        if not contacts:
            print("No contacts to display.")
            return

        print(f"\n{'ID':<32}  {'Name':<24} {'Phone':<18} Email")
        print("-" * 100)
        for contact in contacts:
            print(format_contact(contact))
        print(f"\nTotal: {len(contacts)} contact(s)")

    def _resolve(self, id_or_prefix: str) -> Contact | None:
        """Find a contact by full id or by a unique id prefix."""
        if not id_or_prefix:
            return None

        contact = self.store.get_by_id(id_or_prefix)
        if contact is not None:
            return contact

        matches = [c for c in self.store.list_all() if c.id.startswith(id_or_prefix)]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            print(f"⚠ '{id_or_prefix}' matches {len(matches)} contacts, type more of the id.")
        return None

    def _report_save_failure(self, error: PersistenceError) -> None:
        print(f"⚠ Change kept in memory but not saved: {error.reason}")
        print("  Use option 8 to retry saving.")

    def _load(self) -> None:
        result = self.store.load()
        if result.ok:
            print(f"📂 Loaded {result.count} contact(s).")
        else:
            print(f"⚠ Starting with an empty contact book ({result.warning}).")
        if result.invalid:
            print(f"⚠ {result.invalid} stored contact(s) have invalid fields.")

    def add_contact(self) -> None:
        """Prompt for fields and add a contact."""
        name = self._prompt("Name")
        phone = self._prompt("Phone")
        email_label = "Email" if self.store.email_required else "Email (optional)"
        email = self._prompt(email_label)

        try:
            contact = self.store.add(name, phone, email)
        except ValidationError as e:
            print(f"❌ Invalid {e.field}: {e.reason}")
            return
        except PersistenceError as e:
            self._report_save_failure(e)
            return

        print(f"✓ Added {contact.name} ({contact.id})")

    def list_contacts(self, by_name: bool = False) -> None:
        """Print all contacts, in insertion order or sorted by name."""
        if by_name:
            self._print_contacts(self.store.list_sorted_by_name())
        else:
            self._print_contacts(self.store.list_all())

    def search_contacts(self) -> None:
        """Prompt for a term and print matching contacts."""
        term = self._prompt("Search for")
        if not term:
            print("Enter a search term (use option 2 to list everything).")
            return

        results = self.store.search(term)
        if not results:
            print(f"No contacts found for '{term}'.")
            return
        self._print_contacts(results)

    def show_contact(self) -> None:
        """Prompt for an id and print that contact."""
        contact = self._resolve(self._prompt("Contact id"))
        if contact is None:
            print("❌ Contact not found.")
            return

        print(f"\nID:    {contact.id}")
        print(f"Name:  {contact.name}")
        print(f"Phone: {contact.phone}")
        print(f"Email: {contact.email or '-'}")

    def update_contact(self) -> None:
        """Prompt for new values. An empty answer keeps the current value."""
        contact = self._resolve(self._prompt("Contact id"))
        if contact is None:
            print("❌ Contact not found.")
            return

        print("Press Enter to keep the current value.")
        name = self._prompt(f"Name [{contact.name}]") or None
        phone = self._prompt(f"Phone [{contact.phone}]") or None
        email = self._prompt(f"Email [{contact.email or '-'}]") or None

        try:
            updated = self.store.update(contact.id, name=name, phone=phone, email=email)
        except ContactNotFoundError:
            print("❌ Contact not found.")
            return
        except ValidationError as e:
            print(f"❌ Invalid {e.field}: {e.reason}")
            return
        except PersistenceError as e:
            self._report_save_failure(e)
            return

        print(f"✓ Updated {updated.name}")

    def delete_contact(self) -> None:
        """Prompt for an id and delete that contact after confirmation."""
        contact = self._resolve(self._prompt("Contact id"))
        if contact is None:
            print("❌ Contact not found.")
            return

        confirm = self._prompt(f"Delete {contact.name}? (y/n)").lower()
        if confirm not in ("y", "yes"):
            print("Cancelled.")
            return

        try:
            deleted = self.store.delete(contact.id)
        except PersistenceError as e:
            self._report_save_failure(e)
            return

        if deleted:
            print(f"✓ Deleted {contact.name}")
        else:
            print("❌ Contact not found.")

    def save_contacts(self) -> None:
        """Write the contact book to disk."""
        try:
            self.store.save()
        except PersistenceError as e:
            print(f"❌ {e.reason}")
            return
        print(f"💾 Saved to {self.store.backend.location}")

    def handle_choice(self, choice: str) -> bool:
        """Run one menu choice.

        Returns:
            False if the user asked to exit, True otherwise.
        """
        choice = choice.strip().lower()

        if choice in EXIT_CHOICES:
            print("\n👋 Goodbye!")
            return False

        actions = {
            "1": self.add_contact,
            "2": self.list_contacts,
            "3": lambda: self.list_contacts(by_name=True),
            "4": self.search_contacts,
            "5": self.show_contact,
            "6": self.update_contact,
            "7": self.delete_contact,
            "8": self.save_contacts,
        }
        action = actions.get(choice)
        if action is None:
            print("Unknown option.")
            return True

        action()
        return True

    def run(self) -> None:
        """Run the interactive menu loop."""
        print(BANNER)
        self._load()

        while True:
            try:
                print(MENU)
                choice = input("rolodex> ")
                if not self.handle_choice(choice):
                    break
            except KeyboardInterrupt:
                print("\n\n⚡ Interrupted")
                print("👋 Goodbye!")
                break
            except EOFError:
                print("\n👋 Goodbye!")
                break


def run_cli(config: RolodexConfig | None = None) -> None:
    """Run the CLI with the given or environment configuration."""
    cli = CLI(config=config)
    cli.run()
