"""
Command-Line Interface for vaultseed

Provides commands for:
- generate: Create a fresh store and load the synthetic dataset
- verify: Report row counts, columns and integrity of a store
- config: Manage configurations
"""

import argparse
import sys
import logging
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn
from rich.panel import Panel

from vaultseed.config import Config, ConfigLoader, ConfigValidator, get_default_config
from vaultseed.orchestrator import DataOrchestrator
from vaultseed.validation import VerificationReport
from vaultseed.utils import FileHandler, setup_logging

# Setup console
console = Console()


class CLI:
    """Main CLI class"""

    def __init__(self):
        self.parser = self._create_parser()
        self.config_loader = ConfigLoader()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser"""
        parser = argparse.ArgumentParser(
            description="SmartVault synthetic data seeder",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Seed the reference dataset (100 accounts, 1,000,000 documents)
  python cli.py generate

  # Small run with a custom layout
  python cli.py generate --accounts 3 --documents-per-account 2 --batch-size 2

  # Use the original appsettings.json
  python cli.py generate --config appsettings.json

  # Inspect an existing store
  python cli.py verify --database SmartVault.sqlite --output report.json
            """
        )

        parser.add_argument(
            '--verbose', '-v',
            action='store_true',
            help='Enable verbose output'
        )
        parser.add_argument('--log-file', help='Also write logs to this file')

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        # Generate command
        generate_parser = subparsers.add_parser('generate', help='Seed a fresh store')
        generate_parser.add_argument('--config', '-c', help='Configuration file (YAML or JSON)')
        generate_parser.add_argument('--preset', '-p', help='Configuration preset')
        generate_parser.add_argument('--database', '-d', help='Target store file')
        generate_parser.add_argument('--accounts', '-n', type=int, help='Number of accounts (and users)')
        generate_parser.add_argument('--documents-per-account', '-D', type=int, help='Documents per account')
        generate_parser.add_argument('--batch-size', '-b', type=int, help='Documents per bulk insert')
        generate_parser.add_argument('--progress-interval', type=int, help='Log progress every N documents')
        generate_parser.add_argument('--seed', '-s', type=int, help='Seed for the date-of-birth generator')
        generate_parser.add_argument('--schema-version', choices=['v1', 'v2'], help='Schema variant')
        generate_parser.add_argument('--schema-dir', help='Directory of business object descriptors')
        generate_parser.add_argument('--no-verify', action='store_true', help='Skip the verification report')

        # Verify command
        verify_parser = subparsers.add_parser('verify', help='Verify a seeded store')
        verify_parser.add_argument('--config', '-c', help='Configuration file (YAML or JSON)')
        verify_parser.add_argument('--database', '-d', help='Store file to inspect')
        verify_parser.add_argument('--output', '-o', help='Output report file (JSON)')

        # Config command
        config_parser = subparsers.add_parser('config', help='Manage configurations')
        config_subparsers = config_parser.add_subparsers(dest='config_command')

        config_subparsers.add_parser('list', help='List available presets')

        show_parser = config_subparsers.add_parser('show', help='Show preset configuration')
        show_parser.add_argument('preset', help='Preset name')

        create_parser = config_subparsers.add_parser('create', help='Create custom configuration')
        create_parser.add_argument('output', help='Output configuration file')

        return parser

    def run(self, args=None):
        """Run CLI"""
        args = self.parser.parse_args(args)

        log_level = logging.DEBUG if args.verbose else logging.INFO
        setup_logging(level=log_level, log_file=args.log_file)

        if args.command == 'generate':
            self.cmd_generate(args)
        elif args.command == 'verify':
            self.cmd_verify(args)
        elif args.command == 'config':
            self.cmd_config(args)
        else:
            self.parser.print_help()

    def _load_config(self, args) -> Config:
        """Resolve configuration from file, preset or defaults"""
        if getattr(args, 'config', None) and getattr(args, 'preset', None):
            base = self.config_loader.load_preset(args.preset)
            config = self.config_loader.merge_configs(base, FileHandler.read_config(args.config) or {})
            console.print(f"✓ Loaded configuration: {args.config} over preset {args.preset}")
        elif getattr(args, 'config', None):
            config = self.config_loader.load_from_file(args.config)
            console.print(f"✓ Loaded configuration: {args.config}")
        elif getattr(args, 'preset', None):
            config = self.config_loader.load_preset(args.preset)
            console.print(f"✓ Loaded preset: {args.preset}")
        else:
            config = get_default_config()
            console.print("✓ Using default configuration")

        if getattr(args, 'database', None):
            config.store.database_file = args.database

        return config

    def _apply_overrides(self, config: Config, args):
        """Command-line arguments take precedence over configuration"""
        if args.accounts is not None:
            config.generation.num_accounts = args.accounts
        if args.documents_per_account is not None:
            config.generation.documents_per_account = args.documents_per_account
        if args.batch_size is not None:
            config.generation.batch_size = args.batch_size
        if args.progress_interval is not None:
            config.generation.progress_interval = args.progress_interval
        if args.seed is not None:
            config.generation.seed = args.seed
        if args.schema_version:
            config.schema.version = args.schema_version
        if args.schema_dir:
            config.schema.directory = args.schema_dir

    def cmd_generate(self, args):
        """Seed a fresh store"""
        console.print(Panel.fit(
            "🗄️ [bold]Synthetic Data Generation[/bold]",
            border_style="blue"
        ))

        try:
            config = self._load_config(args)
            self._apply_overrides(config, args)

            is_valid, errors = ConfigValidator.validate(config)
            if not is_valid:
                raise ValueError("Invalid configuration: " + "; ".join(errors))

            orchestrator = DataOrchestrator(config)

            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                console=console
            ) as progress:
                task = progress.add_task("Inserting documents...", total=max(config.total_documents, 1))

                def progress_callback(current, total):
                    progress.update(task, completed=current)

                result = orchestrator.run(progress_callback=progress_callback)
                progress.update(task, completed=max(config.total_documents, 1))

            console.print(f"✓ Created database at: {result.database_path}")
            console.print(f"✓ Created test document at: {result.fixture_path}")

            table = Table(title="Generation Summary", show_header=True)
            table.add_column("Metric", style="cyan")
            table.add_column("Value", style="green")

            for name, count in result.counts.items():
                table.add_row(f"Total {name.lower()}s created", f"{count:,}")
            table.add_row("Schema", config.schema.version)
            table.add_row("Batch Size", f"{config.generation.batch_size:,}")
            table.add_row("Seed", str(config.generation.seed if config.generation.seed is not None else "Random"))
            table.add_row("Elapsed", f"{result.generation_time:.3f} s")

            console.print(table)

            if not args.no_verify:
                self._print_report(orchestrator.verify())

            console.print(f"\n[bold green]✓ Data generation completed in {result.generation_time:.3f} seconds[/bold green]")

        except Exception as e:
            console.print(f"[bold red]✗ Error:[/bold red] {str(e)}")
            if args.verbose:
                console.print_exception()
            sys.exit(1)

    def cmd_verify(self, args):
        """Verify a seeded store"""
        console.print(Panel.fit(
            "✅ [bold]Store Verification[/bold]",
            border_style="green"
        ))

        try:
            config = self._load_config(args)
            report = DataOrchestrator(config).verify()
            self._print_report(report)

            if args.output:
                FileHandler.write_json(report.to_dict(), args.output)
                console.print(f"\n✓ Report saved to: {args.output}")

            console.print("\n[bold green]✓ Verification complete![/bold green]")

        except Exception as e:
            console.print(f"[bold red]✗ Error:[/bold red] {str(e)}")
            if args.verbose:
                console.print_exception()
            sys.exit(1)

    def _print_report(self, report: VerificationReport):
        """Render a verification report"""
        console.print("\n[bold]Verifying database structure:[/bold]")

        for name, table_report in report.tables.items():
            table = Table(title=f"Table: {name} ({table_report.row_count:,} rows)", show_header=True)
            table.add_column("Column", style="cyan")
            table.add_column("Type", style="yellow")
            table.add_column("Sample", style="white")

            sample = table_report.sample_row()
            for column, column_type in table_report.columns:
                table.add_row(column, column_type, str(sample.get(column, "")))

            console.print(table)

        for check in report.checks:
            status = "✓" if check.passed else "✗"
            console.print(f"  {status} {check.name}: {check.details}")

        for error in report.errors:
            console.print(f"  [yellow]! {error}[/yellow]")

    def cmd_config(self, args):
        """Manage configurations"""
        console.print(Panel.fit(
            "⚙️ [bold]Configuration Management[/bold]",
            border_style="magenta"
        ))

        try:
            if args.config_command == 'list':
                table = Table(title="Available Presets", show_header=True)
                table.add_column("Preset", style="cyan")
                table.add_column("Accounts", style="white")
                table.add_column("Documents", style="white")
                table.add_column("Schema", style="white")

                for name in self.config_loader.list_presets():
                    preset = self.config_loader.load_preset(name)
                    table.add_row(
                        name,
                        f"{preset.generation.num_accounts:,}",
                        f"{preset.total_documents:,}",
                        preset.schema.version,
                    )

                console.print(table)

            elif args.config_command == 'show':
                config = self.config_loader.load_preset(args.preset)

                console.print(f"\n[bold]Preset: {args.preset}[/bold]\n")
                console.print_json(data=config.to_dict())

            elif args.config_command == 'create':
                self.config_loader.save_config(get_default_config(), args.output)

                console.print(f"✓ Created configuration file: {args.output}")
                console.print("  Edit this file to customize settings")

            else:
                console.print("Use 'config list', 'config show <preset>', or 'config create <file>'")

        except Exception as e:
            console.print(f"[bold red]✗ Error:[/bold red] {str(e)}")
            if args.verbose:
                console.print_exception()
            sys.exit(1)


def main(argv: Optional[list] = None):
    """CLI entry point"""
    cli = CLI()
    cli.run(argv)


if __name__ == "__main__":
    main()
