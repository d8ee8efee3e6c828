"""
Outlook MCP Setup Wizard

Interactive one-time setup: explains the Azure app registration, asks for the
client and tenant IDs, and writes the config file read by the server.

@author: Generated for outlook_mcp repository
"""

import sys
import json
from pathlib import Path
from typing import Callable, Optional

from .config import REDIRECT_URI, build_config_record, save_config


def print_instructions(out: Callable[[str], None] = print):
    """Print the Azure portal steps needed before running the wizard."""
    out("Para configurar este servidor, você precisará:")
    out("1. Um Azure App Registration")
    out("2. Client ID e Tenant ID da aplicação")
    out("3. Permissões configuradas no Azure AD")
    out("")
    out("Siga estas etapas no Azure Portal:")
    out("1. Acesse https://portal.azure.com")
    out("2. Vá para Azure Active Directory > App registrations")
    out('3. Clique em "New registration"')
    out('4. Nome: "MCP Outlook Server"')
    out('5. Supported account types: "Accounts in this organizational directory only"')
    out(f"6. Redirect URI: Mobile and desktop applications - {REDIRECT_URI}")
    out("7. Após criar, anote o Application (client) ID e Directory (tenant) ID")
    out("")
    out('8. Em "API permissions", adicione:')
    out("   - Microsoft Graph > Delegated permissions:")
    for permission in ("Mail.Read", "Mail.ReadWrite", "Mail.Send",
                       "Calendars.Read", "Calendars.ReadWrite", "User.Read"):
        out(f"     * {permission}")
    out('9. Clique em "Grant admin consent" (pode precisar de um admin)')
    out("")
    out('10. Em "Authentication":')
    out(f'    - Certifique-se que "{REDIRECT_URI}" está nas Redirect URIs')
    out('    - Em "Advanced settings", habilite "Allow public client flows"')
    out("")


def ask_required(prompt: str, ask: Callable[[str], str]) -> str:
    """Ask until a non-blank answer is given."""
    while True:
        value = ask(prompt).strip()
        if value:
            return value


def host_snippet() -> dict:
    """Claude Desktop configuration entry that launches the server."""
    return {
        "mcpServers": {
            "outlook": {
                "command": "outlook-mcp",
                "args": [],
                "env": {}
            }
        }
    }


def run_wizard(
    ask: Callable[[str], str] = input,
    out: Callable[[str], None] = print,
    config_file: Optional[Path] = None,
) -> int:
    """
    Run the setup prompts.

    Args:
        ask: Prompt function (input() by default)
        out: Output function (print() by default)
        config_file: Where to write the config (default location if None)

    Returns:
        Exit status (0 also when the user stops at the gate)
    """
    out("=== Configuração do Servidor MCP Outlook ===")
    out("")
    print_instructions(out)

    proceed = ask("Você já completou essas etapas? (s/n): ")
    if proceed.strip().lower() != "s":
        out("")
        out("Complete as etapas acima e execute novamente este script.")
        return 0

    out("")
    out("--- Configuração ---")
    out("")

    client_id = ask_required("Digite o Client ID: ", ask)
    tenant_id = ask_required("Digite o Tenant ID: ", ask)

    path = save_config(build_config_record(client_id, tenant_id), config_file)

    out("")
    out("✅ Configuração salva com sucesso!")
    out(f"📁 Arquivo: {path}")
    out("")
    out("--- Próximos passos ---")
    out("")
    out("1. Instale o pacote:")
    out("   pip install -e .")
    out("")
    out("2. Configure o Claude Desktop:")
    out("   Adicione ao arquivo de configuração do Claude Desktop:")
    out("   (normalmente em %APPDATA%/Claude/claude_desktop_config.json)")
    out("")
    out(json.dumps(host_snippet(), indent=2))
    out("")
    out("3. Reinicie o Claude Desktop")
    out("")
    out("4. Na primeira execução, uma janela do navegador abrirá para autenticação")
    out("   Faça login com sua conta corporativa do Office 365")
    out("")
    return 0


def main() -> int:
    """Entry point for the outlook-mcp-setup command."""
    try:
        return run_wizard()
    except (KeyboardInterrupt, EOFError):
        print()
        print("Configuração cancelada.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
