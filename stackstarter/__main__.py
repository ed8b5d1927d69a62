from stackstarter.pipeline import main

main()
