from contract_scaffold.cli import main

main()
