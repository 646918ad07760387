from trustroot_assembler.main import main

main()
